"""Album art extraction and embedding."""

from typing import Optional

from .tagset import PictureFrame, PictureType, TagSet


def extract_first_picture(tagset: TagSet) -> Optional[bytes]:
    """Raw bytes of the first picture frame, or None if there is none.

    The container allows several pictures but in practice there is only one.
    """
    for pic in tagset.pictures():
        return pic.data
    return None


def embed_front_cover(tagset: TagSet, data: bytes) -> PictureFrame:
    """Append a front-cover JPEG picture. Existing pictures are kept."""
    pic = PictureFrame(
        data=data,
        mime="image/jpeg",
        picture_type=PictureType.COVER_FRONT,
        description="",
    )
    tagset.add(pic)
    return pic
