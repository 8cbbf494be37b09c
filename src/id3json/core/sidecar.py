"""
Mapping between a TagSet and its JSON sidecar document.

A sidecar document is a flat JSON object keyed by frame id with string
values. Only text frames are exported. On import, non-string values are
ignored so a sidecar can carry extra structured data of its own.
"""

import json
from typing import Any, Dict

from .errors import InvalidDocumentError, JsonParseError
from .tagset import TagSet, TextFrame

SidecarDocument = Dict[str, str]


def to_document(tagset: TagSet) -> SidecarDocument:
    """Map every text frame to `doc[frame_id] = text`.

    Duplicate frame ids collapse to the last value seen. Key order follows
    the order in which each id was first encountered.
    """
    doc: SidecarDocument = {}
    for frame in tagset.text_frames():
        doc[frame.frame_id] = frame.text
    return doc


def to_tagset(doc: Any) -> TagSet:
    """Build a fresh TagSet holding one text frame per string-valued entry."""
    if not isinstance(doc, dict):
        raise InvalidDocumentError(
            f"Sidecar root must be a JSON object, got {type(doc).__name__}"
        )
    tagset = TagSet()
    for key, value in doc.items():
        if isinstance(value, str):
            tagset.add(TextFrame(str(key), value))
    return tagset


def dumps_document(doc: Any, indent: int = 4) -> str:
    """Serialize a document (or aggregate of documents) as pretty JSON."""
    return json.dumps(doc, indent=indent, ensure_ascii=False) + "\n"


def loads_document(text: str) -> Any:
    # Tolerate a leading byte-order mark
    try:
        return json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        raise JsonParseError(f"Malformed JSON: {e}") from e
