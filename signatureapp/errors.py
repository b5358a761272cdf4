"""Errors raised by the sign and verify pipelines.

Every error carries the HTTP status the server answers with, so the endpoint
layer only has to turn ``message`` into ``{"error": message}``.
"""


class SignatureAppError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class ValidationFailure(SignatureAppError):
    """A form field broke a constraint. Only the first violation is reported."""

    status_code = 400

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class MissingFile(SignatureAppError):
    status_code = 400


class UnsupportedFileType(SignatureAppError):
    status_code = 400


class FileTooLarge(SignatureAppError):
    status_code = 413


class ImageDecodeError(SignatureAppError):
    status_code = 500


class CredentialError(SignatureAppError):
    """Certificate or key material is missing or malformed."""


class SigningError(SignatureAppError):
    PREFIX = "C2PA signing failed: "

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(self.PREFIX + detail)
