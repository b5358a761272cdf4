from dataclasses import dataclass, field

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from signatureapp.config import unescape_pem
from signatureapp.errors import CredentialError

# --- KEY MANAGEMENT ---


@dataclass(frozen=True)
class Credentials:
    """Certificate chain and private key shared by every sign request."""

    certificate_chain: bytes
    private_key: bytes
    _key: ec.EllipticCurvePrivateKey = field(repr=False, compare=False, default=None)

    def __post_init__(self):
        if self._key is None:
            object.__setattr__(self, "_key", load_private_key(self.private_key))
        leaf = load_certificate_chain(self.certificate_chain)[0]
        if leaf.public_key().public_numbers() != self._key.public_key().public_numbers():
            raise CredentialError("Private key does not match the signing certificate")

    @classmethod
    def from_pem_text(cls, certificate_text, private_key_text):
        """Build from env-style PEM text, where newlines may be escaped."""
        if not certificate_text or not certificate_text.strip():
            raise CredentialError("Certificate is not configured (CERTIFICATE_KEY)")
        if not private_key_text or not private_key_text.strip():
            raise CredentialError("Private key is not configured (PRIVATE_KEY)")
        return cls(
            unescape_pem(certificate_text).encode("utf-8"),
            unescape_pem(private_key_text).encode("utf-8"),
        )

    @classmethod
    def from_settings(cls, settings):
        return cls.from_pem_text(settings.certificate_key, settings.private_key)

    @property
    def certificate_pem(self):
        return self.certificate_chain.decode("utf-8")

    def sign(self, data):
        """ES256 signature over ``data``, as c2pa's signer callback expects."""
        return sign_payload(self._key, data)


def load_private_key(pem_bytes):
    """Loads the EC private key used for ES256."""
    try:
        key = serialization.load_pem_private_key(pem_bytes, password=None)
    except (ValueError, TypeError) as e:
        raise CredentialError(f"Private key is not a valid unencrypted PEM key: {e}") from e

    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise CredentialError("Private key must be an EC key for ES256 signing")
    return key


def load_certificate_chain(pem_bytes):
    """Parses the PEM chain, end-entity certificate first."""
    try:
        certs = x509.load_pem_x509_certificates(pem_bytes)
    except ValueError as e:
        raise CredentialError(f"Certificate is not valid PEM: {e}") from e
    if not certs:
        raise CredentialError("Certificate chain is empty")
    return certs


# --- SIGNING ---


def sign_payload(private_key, payload_bytes):
    """Signs raw bytes with ECDSA over SHA-256 (DER-encoded signature)."""
    return private_key.sign(payload_bytes, ec.ECDSA(hashes.SHA256()))
