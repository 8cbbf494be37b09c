"""
id3json CLI - Main entry point using Typer.

This module configures the main Typer application, registers the commands,
and defines global options like --version and --verbose.
"""

import typer
from rich.console import Console
from rich.traceback import install

from .commands import batch, convert
from .core.logging_util import setup_logging

# Install a rich traceback handler for beautiful, readable exceptions
install(show_locals=False)

console = Console(stderr=True)

app = typer.Typer(
    name="id3json",
    help="🏷️ id3json - Move ID3 tags and album art between audio files and JSON sidecars.",
    epilog="Use `id3json [COMMAND] --help` for more info on a specific command.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,  # Disable Typer's default handler to use Rich's
)

app.command("extract")(convert.extract)
app.command("apply")(convert.apply)
app.command("batch-extract")(batch.batch_extract_cmd)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        is_eager=True,
    ),
    verbose: bool = typer.Option(None, "--verbose", help="Enable DEBUG-level logging."),
    quiet: bool = typer.Option(
        None, "--quiet", help="Reduce logging to warnings and errors."
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Emit logs as JSON lines to stderr."
    ),
):
    """
    id3json - Edit audio metadata as plain JSON.
    """
    if version:
        from . import __version__

        console.print(f"id3json v{__version__}")
        raise typer.Exit()

    setup_logging(json_logs=json_logs, verbose=bool(verbose), quiet=bool(quiet))


def cli():
    """Main entry point for the console script defined in pyproject.toml."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Operation cancelled by user.[/yellow]")
        raise SystemExit(130)


if __name__ == "__main__":
    cli()
