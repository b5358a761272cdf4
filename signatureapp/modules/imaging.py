import io
import logging
from dataclasses import dataclass
from pathlib import PurePosixPath

from PIL import Image, UnidentifiedImageError

from signatureapp.errors import ImageDecodeError

logger = logging.getLogger(__name__)

# --- CONFIGURATION ---
# JPEG is the one format every c2pa build can embed into.
TARGET_MIME = "image/jpeg"
TARGET_EXT = ".jpg"
JPEG_MIMES = ("image/jpeg", "image/jpg")

# High, but below 100 which only inflates the file.
JPEG_QUALITY = 95


@dataclass(frozen=True)
class NormalizedAsset:
    image_bytes: bytes
    mime_type: str
    filename: str


def is_target_format(mime_type):
    return (mime_type or "").lower() in JPEG_MIMES


def jpeg_filename(filename):
    """Swap (or add) the extension for ``.jpg``."""
    name = PurePosixPath(filename or "").name
    if not name:
        return "image" + TARGET_EXT
    return str(PurePosixPath(name).with_suffix(TARGET_EXT))


def to_jpeg(image_bytes, quality=JPEG_QUALITY):
    """Re-encode any Pillow-readable image as JPEG, in memory."""
    try:
        img = Image.open(io.BytesIO(image_bytes))
        # Animated GIF/WebP: the first frame is what gets signed
        img.seek(0)

        # JPEG has no alpha channel, so composite onto white first
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            img = background
        else:
            img = img.convert("RGB")

        out = io.BytesIO()
        img.save(out, "JPEG", quality=quality)
        return out.getvalue()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to convert image: {e}") from e


def normalize(image_bytes, mime_type, filename):
    """
    Make sure the asset is JPEG before it reaches the manifest builder.
    JPEG input passes through untouched.
    """
    if is_target_format(mime_type):
        return NormalizedAsset(image_bytes, TARGET_MIME, PurePosixPath(filename or "").name or "image.jpg")

    converted = to_jpeg(image_bytes)
    logger.info("Converted %s (%d bytes) to JPEG (%d bytes)", mime_type, len(image_bytes), len(converted))
    return NormalizedAsset(converted, TARGET_MIME, jpeg_filename(filename))
