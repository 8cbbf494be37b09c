"""
Batch extraction over files and directory trees.

Inputs are walked with an explicit worklist, so depth is bounded by the
filesystem rather than the interpreter's recursion limit. Directories are
remembered by (device, inode) which stops symlink loops.

Failure policy: a file whose tags cannot be read is logged and skipped and
the walk carries on. Failing to write a sidecar or art file is fatal and
aborts the whole run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .art import extract_first_picture
from .codec import MutagenTagCodec, TagCodec
from .convert import write_art, write_sidecar
from .errors import TagReadError
from .sidecar import SidecarDocument, to_document

log = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, str], None]


@dataclass
class BatchReport:
    processed: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)
    # Only set in aggregate mode: audio path -> sidecar document
    aggregate: Optional[Dict[str, SidecarDocument]] = None

    @property
    def ok(self) -> bool:
        return not self.failed


def is_audio_file(path: Path, audio_match: str = "mp3") -> bool:
    """Case-sensitive substring match anywhere in the path."""
    return audio_match in str(path)


def _dir_key(path: Path) -> Optional[Tuple[int, int]]:
    try:
        st = os.stat(path)
    except OSError:
        return None
    return (st.st_dev, st.st_ino)


def iter_audio_files(
    paths: Iterable[Path],
    *,
    recurse: bool = True,
    audio_match: str = "mp3",
    on_error: Optional[ErrorCallback] = None,
) -> Iterator[Path]:
    """Yield matching audio files under `paths`, depth first, in input order.

    Directories given directly are always listed. Directories found inside
    them are only descended into when `recurse` is true. Entries within a
    directory are visited in name order.
    """
    # Stack of (path, is_top_level); reversed so pops follow input order
    pending: List[Tuple[Path, bool]] = [(Path(p), True) for p in reversed(list(paths))]
    visited: Set[Tuple[int, int]] = set()

    while pending:
        path, top_level = pending.pop()

        if path.is_dir():
            if not top_level and not recurse:
                log.debug("Not descending into %s", path)
                continue
            key = _dir_key(path)
            if key is not None:
                if key in visited:
                    log.debug("Already visited %s, skipping", path)
                    continue
                visited.add(key)
            try:
                children = sorted(path.iterdir())
            except OSError as e:
                log.warning("Cannot list %s: %s", path, e)
                continue
            pending.extend((child, False) for child in reversed(children))
        elif path.is_file():
            if is_audio_file(path, audio_match):
                yield path
            else:
                log.debug("Skipping non-audio file %s", path)
        elif not path.exists():
            msg = f"{path} does not exist"
            if top_level and on_error is not None:
                on_error(path, msg)
            else:
                log.debug(msg)


def batch_extract(
    paths: Iterable[Path],
    *,
    aggregate: bool = False,
    recurse: bool = True,
    codec: Optional[TagCodec] = None,
    indent: int = 4,
    sidecar_suffix: str = ".json",
    art_suffix: str = ".jpeg",
    audio_match: str = "mp3",
) -> BatchReport:
    """Extract tags (and art) from every audio file under `paths`.

    With `aggregate`, no per-file sidecars are written; each document is
    collected into `report.aggregate` keyed by file path, for the caller to
    emit once. Album art is always written next to its audio file.

    Raises:
        FileAccessError: a sidecar or art file could not be written.
    """
    codec = codec or MutagenTagCodec()
    report = BatchReport(aggregate={} if aggregate else None)

    def _failed(path: Path, message: str) -> None:
        log.warning("%s", message)
        report.failed.append((path, message))

    for audio_path in iter_audio_files(
        paths, recurse=recurse, audio_match=audio_match, on_error=_failed
    ):
        try:
            tagset = codec.read(audio_path)
        except TagReadError as e:
            _failed(audio_path, f"{audio_path}: {e}")
            continue

        doc = to_document(tagset)
        if report.aggregate is not None:
            report.aggregate[str(audio_path)] = doc
        else:
            sidecar_path = audio_path.with_suffix(sidecar_suffix)
            write_sidecar(sidecar_path, doc, indent=indent)
            log.debug("Wrote %s", sidecar_path)

        picture = extract_first_picture(tagset)
        if picture is not None:
            art_path = audio_path.with_suffix(art_suffix)
            write_art(art_path, picture)
            log.debug("Wrote %s", art_path)

        report.processed.append(audio_path)

    log.info(
        "Batch finished: %d processed, %d failed",
        len(report.processed),
        len(report.failed),
    )
    return report
