# src/id3json/core/errors.py

from pathlib import Path
from typing import Optional


class Id3JsonError(Exception):
    """Base application error for id3json.

    Use this for predictable, user-facing error messages that should be
    caught by the CLI and displayed nicely.
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class TagReadError(Id3JsonError):
    """The tag container could not be opened or parsed."""


class TagWriteError(Id3JsonError):
    """The tag container could not be serialized or written."""


class FileAccessError(Id3JsonError):
    """A sidecar or art file could not be read, created or written."""


class JsonParseError(Id3JsonError):
    """Sidecar text is not well-formed JSON."""


class InvalidDocumentError(Id3JsonError):
    """Parsed sidecar root is not an object."""


class MissingArtError(Id3JsonError):
    """An explicitly supplied art path does not exist."""
