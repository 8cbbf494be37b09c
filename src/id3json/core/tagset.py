"""
Library-independent model of a tag container.

A `TagSet` is an ordered list of frames. Frame ids need not be unique; the
sidecar mapping decides how duplicates collapse. Only two kinds of frame
are modelled: text frames and attached pictures. Anything else the
container holds is dropped when it is read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Optional, Union


class PictureType(IntEnum):
    """ID3 APIC picture classifications (the subset we care about plus OTHER)."""

    OTHER = 0
    FILE_ICON = 1
    OTHER_FILE_ICON = 2
    COVER_FRONT = 3
    COVER_BACK = 4


@dataclass
class TextFrame:
    frame_id: str
    text: str


@dataclass
class PictureFrame:
    data: bytes
    mime: str = "image/jpeg"
    picture_type: int = PictureType.COVER_FRONT
    description: str = ""
    frame_id: str = field(default="APIC", init=False)


Frame = Union[TextFrame, PictureFrame]


@dataclass
class TagSet:
    frames: List[Frame] = field(default_factory=list)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.frames)

    def __len__(self) -> int:
        return len(self.frames)

    def add(self, frame: Frame) -> None:
        self.frames.append(frame)

    def text_frames(self) -> Iterator[TextFrame]:
        return (f for f in self.frames if isinstance(f, TextFrame))

    def pictures(self) -> Iterator[PictureFrame]:
        return (f for f in self.frames if isinstance(f, PictureFrame))

    def get_text(self, frame_id: str) -> Optional[str]:
        """Return the text of the first frame with this id, if any."""
        for f in self.text_frames():
            if f.frame_id == frame_id:
                return f.text
        return None
