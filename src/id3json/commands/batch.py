"""
Batch extraction command (`id3json batch-extract`).
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..core.batch import batch_extract
from ..core.config import get_settings
from ..core.errors import Id3JsonError
from ..core.sidecar import dumps_document

err_console = Console(stderr=True)


def batch_extract_cmd(
    paths: List[Path] = typer.Argument(
        ..., help="Audio files and/or directories to extract tags from."
    ),
    aggregate_output: bool = typer.Option(
        False,
        "--aggregate-output",
        help="Print one JSON object keyed by file path instead of writing a sidecar per file.",
    ),
    recurse: Optional[bool] = typer.Option(
        None,
        "--recurse/--no-recurse",
        help="Descend into nested directories. Defaults to the 'recurse' setting (on).",
    ),
):
    """Extract tags and album art from many files, walking directories."""
    settings = get_settings()
    if recurse is None:
        recurse = settings.recurse

    try:
        report = batch_extract(
            paths,
            aggregate=aggregate_output,
            recurse=recurse,
            indent=settings.json_indent,
            sidecar_suffix=settings.sidecar_suffix,
            art_suffix=settings.batch_art_suffix,
            audio_match=settings.audio_match,
        )
    except Id3JsonError as e:
        err_console.print(f"[bold red]Batch aborted:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if report.aggregate is not None:
        # Plain stdout; Rich markup would mangle the JSON
        typer.echo(dumps_document(report.aggregate, indent=settings.json_indent), nl=False)

    summary = f"{len(report.processed)} file(s) processed"
    if report.failed:
        err_console.print(f"[yellow]{summary}, {len(report.failed)} failed:[/yellow]")
        for path, message in report.failed:
            err_console.print(f"  [red]✗[/red] {escape(message)}")
        raise typer.Exit(1)
    err_console.print(f"[green]✓ {summary}[/green]")
