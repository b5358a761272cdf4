import argparse
import json
import mimetypes
import os
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from signatureapp.config import configure_logging, get_settings
from signatureapp.verifier_core import analyze_bytes

console = Console()


def render_report(result, file_name):
    if not result["signed"]:
        console.print(Panel(
            f"[bold red]NO SIGNATURE FOUND[/bold red]\n\n{result.get('message', '')}",
            title="Verification Failed",
            border_style="red"
        ))
        return

    content = result["content"]
    credential = result["credential"]

    table = Table(title=f"Content Credentials: {file_name}", style="green")
    table.add_column("Field", justify="right", style="cyan", no_wrap=True)
    table.add_column("Value", justify="left")
    table.add_row("Title", str(content["title"]))
    table.add_row("Issued by", str(content["issuer"]))
    table.add_row("Format", str(content["format"]))
    table.add_row("Algorithm", str(credential["algorithm"]).upper())
    table.add_row("Signed at", str(credential["timestamp"] or "-"))
    table.add_row("App or device", str(result["process"]["appOrDeviceUsed"]))

    meta_text = Text()
    author = result["author"] or {}
    meta_text.append(f"Author:   {author.get('name') or 'Unknown'}\n", style="bold white")
    for action in result["process"]["actions"]:
        meta_text.append(f"Action:   {action['type']} ({action['tool'] or '-'}) {action['timestamp'] or ''}\n", style="dim white")
    for ingredient in result["ingredients"]:
        meta_text.append(f"Ingredient: {ingredient['title']} [{ingredient['relationship'] or '-'}]\n", style="dim white")
    meta_text.append(f"Note:     {result['note'] or 'None'}", style="bold yellow")

    console.print(Panel(meta_text, title="Embedded Manifest", border_style="white"))
    console.print(table)
    # "verified" only means a manifest was found; the certificate chain is not checked against trust anchors
    console.print("[bold yellow]NOTE:[/bold yellow] The signer identity is self-asserted and not checked against a trust list.")


def verify_media(file_path, as_json=False):
    with open(file_path, "rb") as f:
        data = f.read()

    mime_type, _ = mimetypes.guess_type(file_path)
    result = analyze_bytes(data, mime_type, os.path.basename(file_path))

    if as_json:
        console.print_json(json.dumps(result))
    else:
        console.print(Panel.fit(
            f"[bold cyan]VERIFICATION TOOL[/bold cyan]\n"
            f"[yellow]Scanning:[/yellow] {os.path.basename(file_path)}",
            border_style="blue"
        ))
        render_report(result, os.path.basename(file_path))
    return result


def main(argv=None):
    parser = argparse.ArgumentParser(description="Report the C2PA manifest embedded in an image")
    parser.add_argument("file", help="File to verify")
    parser.add_argument("--json", action="store_true", help="Print the raw response payload")
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    if not os.path.exists(args.file):
        console.print(f"[bold red]Error:[/bold red] File {args.file} not found.")
        sys.exit(1)

    result = verify_media(args.file, as_json=args.json)
    if not result["signed"]:
        sys.exit(2)


if __name__ == "__main__":
    main()
