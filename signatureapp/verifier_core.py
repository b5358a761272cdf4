import logging
import mimetypes

from signatureapp.modules import shaping
from signatureapp.modules.provenance import ManifestUnreadable, read_active_manifest

logger = logging.getLogger(__name__)

NO_SIGNATURE = "No C2PA signature found"

# Reason codes, logged only; clients see the same "not signed" framing for both
REASON_NO_MANIFEST = "no_manifest"
REASON_UNREADABLE = "unreadable"


def resolve_mime_type(content_type, filename):
    """Upload content type if it names something concrete, else guess from the name."""
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime and mime != "application/octet-stream":
        return mime
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or mime or "application/octet-stream"


def analyze_bytes(data, content_type=None, filename=None):
    """
    Core logic: reads the embedded manifest -> returns the shaped dictionary.
    Used by both CLI (verify.py) and Web Server.
    "No manifest" and "unreadable manifest" both come back as signed=False.
    """
    mime_type = resolve_mime_type(content_type, filename)

    try:
        store, manifest = read_active_manifest(data, mime_type)
    except ManifestUnreadable as e:
        logger.warning("Could not read C2PA data (%s, %s): %s", REASON_UNREADABLE, mime_type, e)
        return shaping.not_signed(f"Could not read C2PA data: {e}")

    if manifest is None:
        logger.info("No active manifest (%s, %s, %d bytes)", REASON_NO_MANIFEST, mime_type, len(data))
        return shaping.not_signed(NO_SIGNATURE)

    logger.info("Found active manifest in %s (%d bytes)", mime_type, len(data))
    return shaping.shape_manifest(manifest, store, filename, mime_type)
