"""
Single-file commands (`id3json extract`, `id3json apply`).
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..core.config import get_settings
from ..core.convert import apply_file, extract_file
from ..core.errors import Id3JsonError

console = Console()
err_console = Console(stderr=True)


def extract(
    id3: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="The file containing ID3 tags. It must already exist.",
    ),
    json_path: Optional[Path] = typer.Argument(
        None,
        metavar="[JSON]",
        help="Where to write the tags as JSON. Recreated if it already exists. Defaults to the audio path with a .json extension.",
    ),
    art: Optional[Path] = typer.Argument(
        None,
        help="Where to write the album art, if the file has any. Defaults to the audio path with a .jpg extension.",
    ),
):
    """Output the tags and album art (if present) from the given audio file."""
    settings = get_settings()
    try:
        result = extract_file(
            id3,
            json_path,
            art,
            indent=settings.json_indent,
            sidecar_suffix=settings.sidecar_suffix,
            art_suffix=settings.art_suffix,
        )
    except Id3JsonError as e:
        err_console.print(f"[bold red]Something went wrong:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✓ Wrote {result.frame_count} tags to {result.sidecar_path}[/green]")
    if result.art_path:
        console.print(f"[green]✓ Wrote album art to {result.art_path}[/green]")


def apply(
    id3: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="The file to write ID3 tags to. It must already exist.",
    ),
    json_path: Optional[Path] = typer.Argument(
        None,
        metavar="[JSON]",
        help="JSON file holding the tags. Defaults to the audio path with a .json extension.",
    ),
    art: Optional[Path] = typer.Argument(
        None,
        help="Album art to embed as the front cover. Must exist when given.",
    ),
):
    """Given a JSON file containing tags, apply the tags to the given audio file.

    Existing tags in the audio file are replaced, not merged.
    """
    settings = get_settings()
    try:
        tagset = apply_file(id3, json_path, art, sidecar_suffix=settings.sidecar_suffix)
    except Id3JsonError as e:
        err_console.print(f"[bold red]Something went wrong:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✓ Applied {len(tagset)} frames to {id3}[/green]")
