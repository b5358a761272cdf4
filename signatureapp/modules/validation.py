"""Input checks for the sign endpoint: file first, then the text fields."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from signatureapp.errors import FileTooLarge, MissingFile, UnsupportedFileType, ValidationFailure

logger = logging.getLogger(__name__)

# image/jpg is not registered but some clients send it for .jpg files
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"})

FIELD_MESSAGES = {
    "author": {
        "required": "Author name is required",
        "min": "Author name must be at least 2 characters",
        "max": "Author name must be less than 100 characters",
    },
    "signature": {
        "required": "Signature is required",
        "min": "Signature must be at least 3 characters",
        "max": "Signature must be less than 200 characters",
    },
}


class SignFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    author: str = Field(min_length=2, max_length=100)
    signature: str = Field(min_length=3, max_length=200)


def validate_file(filename: Optional[str], content_type: Optional[str], size: Optional[int], max_bytes: int) -> None:
    """Reject a missing, non-image or oversized upload."""
    if not filename:
        raise MissingFile("Please upload an image file")

    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in ALLOWED_MIME_TYPES:
        raise UnsupportedFileType("Only image files are allowed (jpeg, png, gif, webp)")

    if size is not None and size > max_bytes:
        raise FileTooLarge(f"File too large: max {max_bytes // (1024 * 1024)} MB")


def validate_text_fields(author: Optional[str], signature: Optional[str]) -> SignFields:
    """Return the trimmed fields or raise ``ValidationFailure`` for the first bad one."""
    try:
        return SignFields(author=author, signature=signature)
    except PydanticValidationError as e:
        raise _first_failure(e, {"author": author, "signature": signature}) from None


def _first_failure(error: PydanticValidationError, raw: dict) -> ValidationFailure:
    detail = error.errors()[0]
    field = str(detail["loc"][0])
    messages = FIELD_MESSAGES[field]

    value = raw.get(field)
    if detail["type"] == "missing" or not isinstance(value, str) or not value.strip():
        kind = "required"
    elif detail["type"] == "string_too_long":
        kind = "max"
    else:
        kind = "min"

    logger.debug("Rejected field %s (%s)", field, detail["type"])
    return ValidationFailure(field, messages[kind])
