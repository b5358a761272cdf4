"""SignatureApp settings.

Values come from the environment (prefix ``SIGNATUREAPP_``) or a ``.env`` file.
The signing credentials also accept the bare ``CERTIFICATE_KEY`` and
``PRIVATE_KEY`` names, which is how most deployments provide them.

Usage:
    from signatureapp.config import get_settings
    settings = get_settings()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from rich.logging import RichHandler


class Settings(BaseSettings):
    """Typed application settings."""

    model_config = {"env_prefix": "SIGNATUREAPP_", "env_file": ".env", "extra": "ignore", "populate_by_name": True}

    # --- Signing credentials (PEM text, newlines may be escaped as \n) ---
    certificate_key: str = Field(
        "",
        validation_alias=AliasChoices("CERTIFICATE_KEY", "SIGNATUREAPP_CERTIFICATE_KEY"),
        description="PEM certificate chain, end-entity first",
    )
    private_key: str = Field(
        "",
        validation_alias=AliasChoices("PRIVATE_KEY", "SIGNATUREAPP_PRIVATE_KEY"),
        description="PEM EC private key matching the certificate",
    )
    tsa_url: Optional[str] = Field(None, description="RFC 3161 timestamp authority URL")

    # --- Server ---
    host: str = Field("0.0.0.0", description="API bind host")
    port: int = Field(3000, description="API bind port")
    cors_origins: str = Field("*", description="Comma-separated CORS origins")
    max_upload_bytes: int = Field(1000 * 1024 * 1024, description="Max upload size in bytes")

    # --- Logging ---
    log_level: str = Field("INFO", description="Log level")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def max_upload_mb(self) -> int:
        return self.max_upload_bytes // (1024 * 1024)


def unescape_pem(text: str) -> str:
    """Turn literal ``\\n`` sequences (as stored in env files) into newlines."""
    return text.replace("\\n", "\n")


def configure_logging(level: str = "INFO") -> None:
    """Route the root logger through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the application settings."""
    return Settings()
