import logging
from dataclasses import dataclass

from signatureapp.modules import imaging, validation
from signatureapp.modules.manifest import build_manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignOutcome:
    data: bytes
    mime_type: str
    filename: str

    @property
    def download_name(self):
        return f"signed_{self.filename}"


def sign_image(invoker, image_bytes, mime_type, filename, author, signature, max_bytes, clock=None):
    """
    Core sign pipeline: validate -> normalize -> build manifest -> sign.
    Used by both the CLI (sign.py) and the web server.
    Raises a SignatureAppError subclass on any failure; nothing partial is returned.
    """
    validation.validate_file(filename, mime_type, len(image_bytes), max_bytes)
    fields = validation.validate_text_fields(author, signature)

    asset = imaging.normalize(image_bytes, mime_type, filename)
    manifest = build_manifest(fields.author, fields.signature, asset.mime_type, clock=clock)

    logger.info("Embedding C2PA manifest into %s (%d bytes, memory only)", asset.mime_type, len(asset.image_bytes))
    signed = invoker.sign(manifest, asset)
    logger.info("C2PA signing complete (%d bytes)", len(signed.data))

    return SignOutcome(signed.data, signed.mime_type, asset.filename)
