"""Boundary with the c2pa library: embed a signed manifest, read one back.

Both directions work on in-memory streams only.
"""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import c2pa

from signatureapp.errors import SigningError
from signatureapp.modules.crypto import Credentials
from signatureapp.modules.imaging import NormalizedAsset
from signatureapp.modules.manifest import ManifestDescription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedAsset:
    data: bytes
    mime_type: str


class SigningInvoker:
    """Signs assets with the process-wide credentials.

    ``credentials`` may be ``None`` when the deployment has none configured;
    every ``sign`` call then fails with ``SigningError``.
    """

    def __init__(self, credentials: Optional[Credentials], tsa_url: Optional[str] = None):
        self._credentials = credentials
        self._tsa_url = tsa_url or None

    @property
    def ready(self) -> bool:
        return self._credentials is not None

    def sign(self, manifest: ManifestDescription, asset: NormalizedAsset) -> SignedAsset:
        if self._credentials is None:
            raise SigningError("signing credentials are not configured")

        source = io.BytesIO(asset.image_bytes)
        dest = io.BytesIO()
        try:
            with c2pa.Signer.from_callback(
                callback=self._credentials.sign,
                alg=c2pa.C2paSigningAlg.ES256,
                certs=self._credentials.certificate_pem,
                tsa_url=self._tsa_url,
            ) as signer:
                with c2pa.Builder(manifest.to_json()) as builder:
                    builder.sign(signer, asset.mime_type, source, dest)
        except Exception as e:
            raise SigningError(str(e) or type(e).__name__) from e

        return SignedAsset(dest.getvalue(), asset.mime_type)


class ManifestUnreadable(Exception):
    """The asset has C2PA data (or might) but the library could not parse it."""


def read_active_manifest(data: bytes, mime_type: str) -> tuple[Optional[dict[str, Any]], Optional[dict[str, Any]]]:
    """Return ``(store, active_manifest)``.

    ``(None, None)`` means the asset carries no manifest. Anything else the
    library raises is wrapped in ``ManifestUnreadable``.
    """
    try:
        with c2pa.Reader(mime_type, io.BytesIO(data)) as reader:
            store = json.loads(reader.json())
    except c2pa.C2paError.ManifestNotFound:
        return None, None
    except Exception as e:
        raise ManifestUnreadable(str(e) or type(e).__name__) from e

    if not isinstance(store, dict):
        return None, None

    label = store.get("active_manifest")
    manifest = (store.get("manifests") or {}).get(label) if label else None
    if not isinstance(manifest, dict) or not manifest:
        return store, None
    return store, manifest
