"""Commands for the id3json CLI.

Each module exposes plain functions that `id3json.cli`
registers on the main Typer app.
"""

from . import batch as batch  # noqa: F401
from . import convert as convert  # noqa: F401

__all__ = [
    "batch",
    "convert",
]
