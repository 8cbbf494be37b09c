import copy
import logging
from pathlib import Path

import pytest

from id3json.core.config import reset_settings
from id3json.core.errors import TagReadError, TagWriteError
from id3json.core.tagset import TagSet


class FakeTagCodec:
    """In-memory stand-in for the mutagen codec, keyed by path."""

    def __init__(self, tags=None):
        self.tags = {Path(p): ts for p, ts in (tags or {}).items()}
        self.writes = []
        self.fail_write = False

    def read(self, path: Path) -> TagSet:
        try:
            return copy.deepcopy(self.tags[Path(path)])
        except KeyError:
            raise TagReadError(f"Unable to open id3 file: no tag in {path}", path)

    def write(self, path: Path, tagset: TagSet) -> None:
        if self.fail_write:
            raise TagWriteError(f"Unable to write id3 tags to {path}", path)
        self.tags[Path(path)] = copy.deepcopy(tagset)
        self.writes.append(Path(path))


@pytest.fixture
def fake_codec():
    return FakeTagCodec()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.setenv("ID3JSON_IGNORE_LOCAL_SETTINGS", "1")
    monkeypatch.delenv("ID3JSON_SETTINGS_PATH", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # The CLI callback reconfigures the root logger
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
