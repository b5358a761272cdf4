import argparse
import mimetypes
import os
import sys

from rich.console import Console
from rich.panel import Panel

from signatureapp.config import configure_logging, get_settings
from signatureapp.errors import CredentialError, SignatureAppError
from signatureapp.modules.crypto import Credentials
from signatureapp.modules.provenance import SigningInvoker
from signatureapp.signer_core import sign_image

console = Console()


def process_signing(file_path, author, signature, output_dir=None):
    settings = get_settings()

    console.print(Panel.fit(
        f"[bold cyan]C2PA SIGNER[/bold cyan]\n"
        f"[yellow]Author:[/yellow] {author}\n"
        f"[yellow]Target:[/yellow] {os.path.basename(file_path)}",
        border_style="blue"
    ))

    mime_type, _ = mimetypes.guess_type(file_path)
    console.print(f"[italic]Detected MIME Type:[/italic] [bold]{mime_type or 'unknown'}[/bold]")

    try:
        credentials = Credentials.from_settings(settings)
    except CredentialError as e:
        console.print(f"[bold red]Key Error:[/bold red] {e.message}")
        return None

    with open(file_path, "rb") as f:
        image_bytes = f.read()

    try:
        with console.status("[cyan]Embedding C2PA manifest..."):
            outcome = sign_image(
                SigningInvoker(credentials, tsa_url=settings.tsa_url),
                image_bytes,
                mime_type,
                os.path.basename(file_path),
                author,
                signature,
                settings.max_upload_bytes,
            )
    except SignatureAppError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        return None

    output_dir = output_dir or os.path.dirname(os.path.abspath(file_path))
    final_output_path = os.path.join(output_dir, outcome.download_name)
    with open(final_output_path, "wb") as f:
        f.write(outcome.data)

    console.print(f"[bold green]SUCCESS![/bold green] Signed image saved to: [underline]{final_output_path}[/underline]")
    return final_output_path


def main(argv=None):
    parser = argparse.ArgumentParser(description="Embed a signed C2PA manifest into an image")
    parser.add_argument("file", help="Path to the image to sign")
    parser.add_argument("--author", help="Author name recorded in the manifest", required=True)
    parser.add_argument("--signature", help="Free-text signature recorded in the manifest note", required=True)
    parser.add_argument("--out", help="Directory for the signed copy (default: next to the input)")

    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    if not os.path.exists(args.file):
        console.print(f"[bold red]Error:[/bold red] File {args.file} not found.")
        sys.exit(1)

    if process_signing(args.file, args.author, args.signature, args.out) is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
