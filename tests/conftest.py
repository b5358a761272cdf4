"""Shared fixtures.

The native c2pa library is replaced by ``FakeC2pa``, a small in-process
stand-in exposing the same surface the service uses. It appends the manifest
definition to the asset bytes on sign and reads it back on verify, and it
checks the ES256 callback signature against the certificate. Like the real
library it refuses a c2pa.created action without a digitalSourceType.
test_c2pa_roundtrip.py runs the same flow through the real library.
"""

import base64
import io
import json
import types

import pytest
from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from PIL import Image

from signatureapp.config import Settings
from signatureapp.key_gen import escape_pem, generate_credentials
from signatureapp.modules import provenance
from signatureapp.modules.crypto import Credentials

MARKER = b"\x00FAKE-C2PA-JUMBF\x00"
FIXED_SIGNED_AT = "2026-01-01T00:00:00+00:00"


class FakeManifestNotFound(Exception):
    pass


class FakeC2paError(Exception):
    ManifestNotFound = FakeManifestNotFound


class FakeSigner:
    def __init__(self, callback, alg, certs, tsa_url):
        self.callback = callback
        self.alg = alg
        self.certs = certs
        self.tsa_url = tsa_url

    @classmethod
    def from_callback(cls, callback, alg, certs, tsa_url=None):
        if not certs:
            raise FakeC2paError("Invalid certificate data: Missing certificate data")
        return cls(callback, alg, certs, tsa_url)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeBuilder:
    def __init__(self, manifest_json):
        self.definition = json.loads(manifest_json) if isinstance(manifest_json, str) else dict(manifest_json)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def sign(self, signer, format, source, dest):
        for assertion in self.definition.get("assertions", []):
            if assertion["label"] != "c2pa.actions":
                continue
            for action in assertion["data"]["actions"]:
                if action["action"] == "c2pa.created" and not action.get("digitalSourceType"):
                    raise FakeC2paError("assertion.action.malformed: c2pa.created action must have a digitalSourceType")

        claim = json.dumps(self.definition, sort_keys=True).encode("utf-8")
        signature = signer.callback(claim)

        leaf = x509.load_pem_x509_certificates(signer.certs.encode("utf-8"))[0]
        try:
            leaf.public_key().verify(signature, claim, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            raise FakeC2paError("Signature: claim signature does not match certificate")

        record = {
            "definition": self.definition,
            "format": format,
            "issuer": leaf.subject.rfc4514_string(),
            "signature": base64.b64encode(signature).decode("ascii"),
        }
        dest.write(source.read() + MARKER + json.dumps(record).encode("utf-8"))
        return claim


class FakeReader:
    def __init__(self, format, stream):
        data = stream.read()
        if MARKER not in data:
            raise FakeManifestNotFound("ManifestNotFound: no JUMBF data found")
        record = json.loads(data.split(MARKER, 1)[1].decode("utf-8"))

        manifest = dict(record["definition"])
        manifest["label"] = "urn:c2pa:fake-manifest"
        manifest["ingredients"] = []
        manifest["signature_info"] = {"alg": "Es256", "issuer": record["issuer"], "time": FIXED_SIGNED_AT}
        self.store = {"active_manifest": manifest["label"], "manifests": {manifest["label"]: manifest}}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def json(self):
        return json.dumps(self.store)


FakeC2pa = types.SimpleNamespace(
    Signer=FakeSigner,
    Builder=FakeBuilder,
    Reader=FakeReader,
    C2paError=FakeC2paError,
    C2paSigningAlg=types.SimpleNamespace(ES256="es256"),
)


def make_image(fmt="PNG", mode="RGB", size=(32, 24), color=(200, 30, 90)):
    if mode in ("RGBA", "LA"):
        color = color + (128,) if mode == "RGBA" else (128, 128)
    elif mode in ("L", "P"):
        color = 120
    img = Image.new(mode, size, color)
    out = io.BytesIO()
    img.save(out, fmt)
    return out.getvalue()


@pytest.fixture
def fake_c2pa(monkeypatch):
    monkeypatch.setattr(provenance, "c2pa", FakeC2pa)
    return FakeC2pa


@pytest.fixture(scope="session")
def pem_pair():
    """(chain_pem, key_pem) bytes for a throwaway ES256 signer."""
    return generate_credentials("Test Signer", "SignatureApp Tests")


@pytest.fixture(scope="session")
def credentials(pem_pair):
    chain_pem, key_pem = pem_pair
    return Credentials(chain_pem, key_pem)


@pytest.fixture
def settings(pem_pair):
    chain_pem, key_pem = pem_pair
    return Settings(
        _env_file=None,
        certificate_key=escape_pem(chain_pem),
        private_key=escape_pem(key_pem),
    )


@pytest.fixture
def client(settings, fake_c2pa):
    from fastapi.testclient import TestClient

    from signatureapp.server import create_app

    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def png_bytes():
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image("JPEG")
