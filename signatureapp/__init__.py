"""SignatureApp: attach and check C2PA content credentials on images."""

__version__ = "1.0.0"
