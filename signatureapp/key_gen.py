import argparse
import datetime
import os

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from rich.console import Console

console = Console(stderr=True)


def _name(common_name, organization):
    return x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
    ])


def generate_credentials(common_name="SignatureApp Signer", organization="SignatureApp", days=365):
    """
    Development ES256 credentials: a P-256 root CA and an end-entity
    certificate issued by it. Returns (chain_pem, key_pem) as bytes,
    with the end-entity certificate first in the chain.
    """
    now = datetime.datetime.now(datetime.timezone.utc)

    root_key = ec.generate_private_key(ec.SECP256R1())
    root_name = _name(f"{organization} Development Root CA", organization)
    root_cert = (
        x509.CertificateBuilder()
        .subject_name(root_name)
        .issuer_name(root_name)
        .public_key(root_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=5))
        .not_valid_after(now + datetime.timedelta(days=days * 5))
        .add_extension(x509.BasicConstraints(ca=True, path_length=0), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=False, content_commitment=False,
                key_encipherment=False, data_encipherment=False,
                key_agreement=False, key_cert_sign=True, crl_sign=True,
                encipher_only=False, decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(root_key.public_key()), critical=False)
    ).sign(private_key=root_key, algorithm=hashes.SHA256())

    signer_key = ec.generate_private_key(ec.SECP256R1())
    signer_cert = (
        x509.CertificateBuilder()
        .subject_name(_name(common_name, organization))
        .issuer_name(root_cert.subject)
        .public_key(signer_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=5))
        .not_valid_after(now + datetime.timedelta(days=days))
        # C2PA signing certificates: not a CA, digitalSignature only, emailProtection EKU
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True, content_commitment=False,
                key_encipherment=False, data_encipherment=False,
                key_agreement=False, key_cert_sign=False, crl_sign=False,
                encipher_only=False, decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.EMAIL_PROTECTION]), critical=False)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(signer_key.public_key()), critical=False)
        .add_extension(x509.AuthorityKeyIdentifier.from_issuer_public_key(root_key.public_key()), critical=False)
    ).sign(private_key=root_key, algorithm=hashes.SHA256())

    chain_pem = (
        signer_cert.public_bytes(serialization.Encoding.PEM)
        + root_cert.public_bytes(serialization.Encoding.PEM)
    )
    key_pem = signer_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    return chain_pem, key_pem


def escape_pem(pem_bytes):
    """PEM as a single env-file line: real newlines become literal \\n."""
    return pem_bytes.decode("utf-8").strip().replace("\n", "\\n")


def env_lines(chain_pem, key_pem):
    return [
        f'CERTIFICATE_KEY="{escape_pem(chain_pem)}"',
        f'PRIVATE_KEY="{escape_pem(key_pem)}"',
    ]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate development ES256 signing credentials")
    parser.add_argument("--common-name", default="SignatureApp Signer", help="Subject CN of the signing certificate")
    parser.add_argument("--organization", default="SignatureApp", help="Subject O of both certificates")
    parser.add_argument("--env-file", help="Append the variables to this .env file instead of printing them")
    args = parser.parse_args(argv)

    console.print(f"Generating P-256 root CA and signing certificate for: '{args.common_name}'...")
    lines = env_lines(*generate_credentials(args.common_name, args.organization))

    if args.env_file:
        if os.path.exists(args.env_file):
            with open(args.env_file, "r", encoding="utf-8") as f:
                if "CERTIFICATE_KEY=" in f.read():
                    console.print(f"[bold red]ABORTING:[/bold red] {args.env_file} already has CERTIFICATE_KEY.")
                    console.print("   (Remove the old entries manually if you really want to regenerate them.)")
                    return 1
        with open(args.env_file, "a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        console.print(f"[bold green]SUCCESS:[/bold green] credentials appended to {args.env_file} (KEEP SECRET)")
    else:
        for line in lines:
            print(line)

    console.print("[yellow]Development use only: the root CA is not on any C2PA trust list.[/yellow]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
