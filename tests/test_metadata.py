"""Tests for mediaindexer.core.metadata."""

from pathlib import Path

import pytest

from mediaindexer.core.metadata import MusicTagExtractor, TrackTags
from mediaindexer.errors import ErrorCode, UnreadableFileError


class _Field:
    def __init__(self, first):
        self.first = first


class _Artwork:
    def __init__(self, raw=b"\x89PNGdata"):
        self.raw = raw


def _fake_file(values: dict):
    class _File:
        def __getitem__(self, key):
            value = values.get(key)
            if isinstance(value, Exception):
                raise value
            return _Field(value)

    return _File()


class TestTrackTags:
    def test_defaults(self):
        tags = TrackTags()
        assert tags.title == ""
        assert tags.album == ""
        assert tags.track == 0
        assert tags.artwork_data is None
        assert tags.has_artwork is False

    def test_has_artwork(self):
        assert TrackTags(artwork_data=b"\x01").has_artwork is True
        assert TrackTags(artwork_data=b"").has_artwork is False


class TestMusicTagExtractor:
    def test_reads_fields(self, monkeypatch):
        values = {
            "tracktitle": "Song",
            "album": "Record",
            "artist": "Band",
            "genre": "Rock",
            "tracknumber": 7,
            "artwork": _Artwork(),
        }
        monkeypatch.setattr(
            "mediaindexer.core.metadata.music_tag.load_file",
            lambda _path: _fake_file(values),
        )

        tags = MusicTagExtractor().read("dummy.mp3")
        assert tags.title == "Song"
        assert tags.album == "Record"
        assert tags.artist == "Band"
        assert tags.genre == "Rock"
        assert tags.track == 7
        assert tags.artwork_data == b"\x89PNGdata"

    def test_broken_fields_come_back_empty(self, monkeypatch):
        values = {
            "tracktitle": RuntimeError("bad frame"),
            "tracknumber": "not a number",
            "artwork": RuntimeError("bad picture"),
        }
        monkeypatch.setattr(
            "mediaindexer.core.metadata.music_tag.load_file",
            lambda _path: _fake_file(values),
        )

        tags = MusicTagExtractor().read("dummy.mp3")
        assert tags.title == ""
        assert tags.artist == ""
        assert tags.track == 0
        assert tags.artwork_data is None

    def test_no_artwork(self, monkeypatch):
        monkeypatch.setattr(
            "mediaindexer.core.metadata.music_tag.load_file",
            lambda _path: _fake_file({"tracktitle": "Song"}),
        )
        tags = MusicTagExtractor().read("dummy.mp3")
        assert tags.artwork_data is None
        assert tags.has_artwork is False

    def test_load_failure_raises_unreadable(self, monkeypatch):
        def _boom(_path):
            raise RuntimeError("can't sync to MPEG frame")

        monkeypatch.setattr("mediaindexer.core.metadata.music_tag.load_file", _boom)

        with pytest.raises(UnreadableFileError) as excinfo:
            MusicTagExtractor().read("broken.mp3")
        assert excinfo.value.code is ErrorCode.FILE_UNREADABLE
        assert excinfo.value.path == Path("broken.mp3")

    def test_load_returning_none_raises_unreadable(self, monkeypatch):
        monkeypatch.setattr("mediaindexer.core.metadata.music_tag.load_file", lambda _path: None)
        with pytest.raises(UnreadableFileError):
            MusicTagExtractor().read("empty.mp3")

    def test_unknown_extension_is_unreadable(self, tmp_path):
        p = tmp_path / "test.xyz"
        p.write_bytes(b"\x00" * 100)
        with pytest.raises(UnreadableFileError):
            MusicTagExtractor().read(p)
