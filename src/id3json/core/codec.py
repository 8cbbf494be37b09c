"""
Tag container access using Mutagen.

`TagCodec` is the seam between the conversion logic and the on-disk ID3
format. `MutagenTagCodec` is the real implementation; tests substitute an
in-memory fake with the same two methods.
"""

import logging
from pathlib import Path
from typing import Protocol

from mutagen import MutagenError
from mutagen.id3 import APIC, COMM, ID3, TXXX, Frames, TextFrame as ID3TextFrame

from .errors import TagReadError, TagWriteError
from .tagset import PictureFrame, TagSet, TextFrame

log = logging.getLogger(__name__)

# Tags are always written as ID3v2.4 regardless of what was read
WRITE_VERSION = 4

# ID3v2.4 separates multiple text values with NUL
TEXT_SEPARATOR = "\x00"

UTF8 = 3

# mutagen models these as text frames, but they carry a description key too
_KEYED_TEXT_FRAMES = (TXXX, COMM)


class TagCodec(Protocol):
    def read(self, path: Path) -> TagSet: ...

    def write(self, path: Path, tagset: TagSet) -> None: ...


def _text_frame_class(frame_id: str):
    cls = Frames.get(frame_id)
    if cls is None or not issubclass(cls, ID3TextFrame) or issubclass(cls, _KEYED_TEXT_FRAMES):
        return None
    return cls


class MutagenTagCodec:
    """Read and write ID3 tags through mutagen.id3."""

    def read(self, path: Path) -> TagSet:
        try:
            id3 = ID3(path)
        except (MutagenError, OSError) as e:
            raise TagReadError(f"Unable to open id3 file: {e}", path) from e

        tagset = TagSet()
        for frame in id3.values():
            if isinstance(frame, APIC):
                tagset.add(
                    PictureFrame(
                        data=bytes(frame.data),
                        mime=frame.mime,
                        picture_type=int(frame.type),
                        description=frame.desc,
                    )
                )
            elif isinstance(frame, ID3TextFrame) and not isinstance(frame, _KEYED_TEXT_FRAMES):
                text = TEXT_SEPARATOR.join(str(t) for t in frame.text)
                tagset.add(TextFrame(frame.FrameID, text))
            else:
                log.debug("Dropping non-text frame %s from %s", frame.FrameID, path)
        return tagset

    def write(self, path: Path, tagset: TagSet) -> None:
        id3 = ID3()
        for frame in tagset:
            if isinstance(frame, PictureFrame):
                id3.add(
                    APIC(
                        encoding=UTF8,
                        mime=frame.mime,
                        type=frame.picture_type,
                        desc=frame.description,
                        data=frame.data,
                    )
                )
                continue
            cls = _text_frame_class(frame.frame_id)
            if cls is None:
                raise TagWriteError(
                    f"'{frame.frame_id}' is not a writable ID3 text frame", path
                )
            id3.add(cls(encoding=UTF8, text=frame.text.split(TEXT_SEPARATOR)))

        try:
            id3.save(path, v2_version=WRITE_VERSION)
        except (MutagenError, OSError, ValueError) as e:
            raise TagWriteError(f"Unable to write id3 tags to {path}: {e}", path) from e
