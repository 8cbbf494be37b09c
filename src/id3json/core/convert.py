"""
Single-file extract and apply.

`extract_file` writes a tag container's text frames to a JSON sidecar and
its first picture to an art file. `apply_file` builds a fresh tag set from
a sidecar (plus optional art) and writes it over the audio file's tags.

Both abort on the first error. Outputs already written by an earlier step
are left in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .art import embed_front_cover, extract_first_picture
from .codec import MutagenTagCodec, TagCodec
from .errors import FileAccessError, JsonParseError, MissingArtError
from .sidecar import dumps_document, loads_document, to_document, to_tagset
from .tagset import TagSet

log = logging.getLogger(__name__)


@dataclass
class ExtractResult:
    sidecar_path: Path
    art_path: Optional[Path] = None
    frame_count: int = 0


def default_sidecar_path(audio_path: Path, suffix: str = ".json") -> Path:
    """`song.mp3` -> `song.json` (the audio extension is replaced)."""
    return Path(audio_path).with_suffix(suffix)


def default_art_path(audio_path: Path, suffix: str = ".jpg") -> Path:
    return Path(audio_path).with_suffix(suffix)


def write_sidecar(path: Path, doc, indent: int = 4) -> None:
    """Create or truncate `path` and write `doc` as pretty JSON."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(dumps_document(doc, indent=indent))
    except OSError as e:
        raise FileAccessError(f"Cannot write JSON to {path}: {e}", path) from e


def write_art(path: Path, data: bytes) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise FileAccessError(f"Cannot extract album art to {path}: {e}", path) from e


def read_sidecar(path: Path):
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise JsonParseError(f"{path} is not UTF-8 text: {e}", path) from e
    except OSError as e:
        raise FileAccessError(f"Cannot read {path}: {e}", path) from e
    try:
        return loads_document(text)
    except JsonParseError as e:
        raise JsonParseError(f"{path}: {e}", path) from e


def extract_file(
    audio_path: Path,
    sidecar_path: Optional[Path] = None,
    art_path: Optional[Path] = None,
    *,
    codec: Optional[TagCodec] = None,
    indent: int = 4,
    sidecar_suffix: str = ".json",
    art_suffix: str = ".jpg",
) -> ExtractResult:
    """Write the tags of `audio_path` out as JSON, plus album art if present.

    Args:
        audio_path: File holding the ID3 tag.
        sidecar_path: JSON output; recreated even if it already exists.
            Defaults to the audio path with its extension replaced.
        art_path: Art output, only written when the tag has a picture.
            Defaults to the audio path with `art_suffix`.
        codec: Tag container access, mutagen by default.

    Raises:
        TagReadError: the tag could not be read.
        FileAccessError: the sidecar or art file could not be written.
    """
    codec = codec or MutagenTagCodec()
    audio_path = Path(audio_path)
    sidecar_path = Path(sidecar_path) if sidecar_path else default_sidecar_path(audio_path, sidecar_suffix)

    tagset = codec.read(audio_path)
    doc = to_document(tagset)
    write_sidecar(sidecar_path, doc, indent=indent)
    log.info("Wrote %d tags from %s to %s", len(doc), audio_path, sidecar_path)

    result = ExtractResult(sidecar_path=sidecar_path, frame_count=len(doc))
    picture = extract_first_picture(tagset)
    if picture is not None:
        art_path = Path(art_path) if art_path else default_art_path(audio_path, art_suffix)
        write_art(art_path, picture)
        log.info("Wrote album art (%d bytes) to %s", len(picture), art_path)
        result.art_path = art_path
    return result


def apply_file(
    audio_path: Path,
    sidecar_path: Optional[Path] = None,
    art_path: Optional[Path] = None,
    *,
    codec: Optional[TagCodec] = None,
    sidecar_suffix: str = ".json",
) -> TagSet:
    """Replace the tags of `audio_path` with those described by a sidecar.

    The new tag set is built from the sidecar alone; tags and art already in
    the audio file are not carried over. When `art_path` is given it must
    exist, and its bytes are embedded as the front cover.

    Raises:
        FileAccessError: the sidecar or art file could not be read.
        JsonParseError: the sidecar is not well-formed JSON.
        InvalidDocumentError: the sidecar root is not an object.
        MissingArtError: `art_path` was given but does not exist.
        TagWriteError: the tag could not be written.
    """
    codec = codec or MutagenTagCodec()
    audio_path = Path(audio_path)
    sidecar_path = Path(sidecar_path) if sidecar_path else default_sidecar_path(audio_path, sidecar_suffix)

    tagset = to_tagset(read_sidecar(sidecar_path))

    if art_path is not None:
        art_path = Path(art_path)
        if not art_path.exists():
            raise MissingArtError(f"Album art {art_path} not found", art_path)
        try:
            data = art_path.read_bytes()
        except OSError as e:
            raise FileAccessError(f"Cannot read album art {art_path}: {e}", art_path) from e
        embed_front_cover(tagset, data)

    codec.write(audio_path, tagset)
    log.info("Applied %d frames from %s to %s", len(tagset), sidecar_path, audio_path)
    return tagset
