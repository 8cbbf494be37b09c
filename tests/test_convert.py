import json
from pathlib import Path

import pytest
from mutagen.id3 import APIC, ID3, TALB, TIT2, TPE1

from id3json.core.convert import (
    apply_file,
    default_art_path,
    default_sidecar_path,
    extract_file,
)
from id3json.core.errors import (
    FileAccessError,
    InvalidDocumentError,
    JsonParseError,
    MissingArtError,
    TagReadError,
    TagWriteError,
)
from id3json.core.tagset import PictureFrame, TagSet, TextFrame


def _make_mp3_with_id3(path: Path, title: str, artist: str, album: str, art: bytes | None = None) -> None:
    id3 = ID3()
    id3.add(TIT2(encoding=3, text=title))
    id3.add(TPE1(encoding=3, text=artist))
    id3.add(TALB(encoding=3, text=album))
    if art is not None:
        id3.add(APIC(encoding=3, mime="image/jpeg", type=3, desc="", data=art))
    id3.save(path)


def test_default_paths_replace_extension():
    assert default_sidecar_path(Path("music/song.mp3")) == Path("music/song.json")
    assert default_art_path(Path("music/song.mp3")) == Path("music/song.jpg")


def test_extract_writes_sidecar_and_art(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    fake_codec.tags[audio] = TagSet(
        [TextFrame("TIT2", "Song"), PictureFrame(b"art", mime="image/png"), TextFrame("TPE1", "Me")]
    )

    result = extract_file(audio, codec=fake_codec)

    sidecar = tmp_path / "song.json"
    assert result.sidecar_path == sidecar
    assert sidecar.read_text(encoding="utf-8") == '{\n    "TIT2": "Song",\n    "TPE1": "Me"\n}\n'
    assert result.art_path == tmp_path / "song.jpg"
    assert (tmp_path / "song.jpg").read_bytes() == b"art"


def test_extract_without_picture_writes_no_art(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    fake_codec.tags[audio] = TagSet([TextFrame("TIT2", "Song")])

    result = extract_file(audio, codec=fake_codec)

    assert result.art_path is None
    assert not (tmp_path / "song.jpg").exists()


def test_extract_explicit_paths_overwrite(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    fake_codec.tags[audio] = TagSet([TextFrame("TIT2", "Song"), PictureFrame(b"new")])
    sidecar = tmp_path / "out" / "tags.json"
    sidecar.parent.mkdir()
    sidecar.write_text("stale contents that are longer than the new ones" * 10)
    art = tmp_path / "out" / "cover.bin"
    art.write_bytes(b"old art")

    extract_file(audio, sidecar, art, codec=fake_codec)

    assert json.loads(sidecar.read_text(encoding="utf-8")) == {"TIT2": "Song"}
    assert art.read_bytes() == b"new"


def test_extract_read_failure_writes_nothing(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    with pytest.raises(TagReadError):
        extract_file(audio, codec=fake_codec)
    assert not (tmp_path / "song.json").exists()


def test_extract_sidecar_write_failure(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    fake_codec.tags[audio] = TagSet([TextFrame("TIT2", "Song"), PictureFrame(b"art")])

    with pytest.raises(FileAccessError):
        extract_file(audio, tmp_path / "missing-dir" / "tags.json", codec=fake_codec)
    # aborted before the art step
    assert not (tmp_path / "song.jpg").exists()


def test_extract_art_failure_keeps_sidecar(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    fake_codec.tags[audio] = TagSet([TextFrame("TIT2", "Song"), PictureFrame(b"art")])

    with pytest.raises(FileAccessError):
        extract_file(audio, art_path=tmp_path / "nope" / "a.jpg", codec=fake_codec)
    assert (tmp_path / "song.json").exists()


def test_apply_builds_fresh_tagset(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    fake_codec.tags[audio] = TagSet([TextFrame("TALB", "Old"), PictureFrame(b"old art")])
    (tmp_path / "song.json").write_text(json.dumps({"a": "x", "b": 5}), encoding="utf-8")

    apply_file(audio, codec=fake_codec)

    written = fake_codec.tags[audio]
    assert [(f.frame_id, f.text) for f in written] == [("a", "x")]


def test_apply_embeds_art(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    sidecar = tmp_path / "tags.json"
    sidecar.write_text('{"TIT2": "Song"}', encoding="utf-8")
    art = tmp_path / "cover.jpg"
    art.write_bytes(b"\xff\xd8cover")

    apply_file(audio, sidecar, art, codec=fake_codec)

    pics = list(fake_codec.tags[audio].pictures())
    assert len(pics) == 1
    assert pics[0].data == b"\xff\xd8cover"
    assert pics[0].mime == "image/jpeg"


def test_apply_missing_art_is_fatal_and_writes_nothing(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    (tmp_path / "song.json").write_text('{"TIT2": "Song"}', encoding="utf-8")

    with pytest.raises(MissingArtError):
        apply_file(audio, art_path=tmp_path / "nonexistent.jpg", codec=fake_codec)
    assert fake_codec.writes == []


def test_apply_missing_sidecar(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    with pytest.raises(FileAccessError):
        apply_file(audio, codec=fake_codec)
    assert fake_codec.writes == []


def test_apply_malformed_sidecar(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    (tmp_path / "song.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(JsonParseError):
        apply_file(audio, codec=fake_codec)


def test_apply_non_object_sidecar(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    (tmp_path / "song.json").write_text('["TIT2", "Song"]', encoding="utf-8")
    with pytest.raises(InvalidDocumentError):
        apply_file(audio, codec=fake_codec)


def test_apply_write_failure(tmp_path: Path, fake_codec):
    audio = tmp_path / "song.mp3"
    audio.touch()
    (tmp_path / "song.json").write_text('{"TIT2": "Song"}', encoding="utf-8")
    fake_codec.fail_write = True
    with pytest.raises(TagWriteError):
        apply_file(audio, codec=fake_codec)


def test_extract_then_apply_with_mutagen(tmp_path: Path):
    src = tmp_path / "src.mp3"
    _make_mp3_with_id3(src, "Song A", "Artist X", "Album Z", art=b"\xff\xd8\xff\xe0cover")

    extract_file(src)
    doc = json.loads((tmp_path / "src.json").read_text(encoding="utf-8"))
    assert doc == {"TIT2": "Song A", "TPE1": "Artist X", "TALB": "Album Z"}
    assert (tmp_path / "src.jpg").read_bytes() == b"\xff\xd8\xff\xe0cover"

    dst = tmp_path / "dst.mp3"
    ID3().save(dst)
    apply_file(dst, tmp_path / "src.json", tmp_path / "src.jpg")

    extract_file(dst, tmp_path / "dst.json", tmp_path / "dst.jpg")
    assert json.loads((tmp_path / "dst.json").read_text(encoding="utf-8")) == doc
    assert (tmp_path / "dst.jpg").read_bytes() == b"\xff\xd8\xff\xe0cover"
