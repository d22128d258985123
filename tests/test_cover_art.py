"""Tests for mediaindexer.core.cover_art."""

from pathlib import Path

from PySide6.QtGui import QImage

from mediaindexer.core.cover_art import CoverArtAction, CoverArtCache, sidecar_path
from mediaindexer.errors import ErrorCode


class TestSidecarPath:
    def test_appends_png_to_full_name(self):
        assert sidecar_path("/music/a/song.mp3") == Path("/music/a/song.mp3.png")


class TestCoverArtCache:
    def test_missing_artwork_is_noop(self, tmp_path):
        media = tmp_path / "song.mp3"
        media.write_bytes(b"\x00")

        decision = CoverArtCache().apply(media, None)

        assert decision.action is CoverArtAction.MISSING
        assert decision.path is None
        assert decision.error is ErrorCode.COVER_ART_MISSING
        assert not sidecar_path(media).exists()

    def test_writes_sidecar_when_absent(self, tmp_path, png_bytes):
        media = tmp_path / "song.mp3"
        media.write_bytes(b"\x00")

        decision = CoverArtCache().apply(media, png_bytes)

        target = sidecar_path(media)
        assert decision.action is CoverArtAction.WRITTEN
        assert decision.path == str(target)
        assert decision.error is None
        assert target.exists()
        written = QImage(str(target))
        assert not written.isNull()
        assert written.width() == 4

    def test_existing_sidecar_is_not_rewritten(self, tmp_path, png_bytes):
        media = tmp_path / "song.mp3"
        media.write_bytes(b"\x00")
        target = sidecar_path(media)
        target.write_bytes(b"user supplied art")
        before = target.stat().st_mtime_ns

        decision = CoverArtCache().apply(media, png_bytes)

        assert decision.action is CoverArtAction.EXISTING
        assert decision.path == str(target)
        assert target.read_bytes() == b"user supplied art"
        assert target.stat().st_mtime_ns == before

    def test_second_apply_keeps_first_sidecar(self, tmp_path, png_bytes):
        media = tmp_path / "song.mp3"
        media.write_bytes(b"\x00")
        cache = CoverArtCache()

        first = cache.apply(media, png_bytes)
        mtime = Path(first.path).stat().st_mtime_ns
        second = cache.apply(media, png_bytes)

        assert first.action is CoverArtAction.WRITTEN
        assert second.action is CoverArtAction.EXISTING
        assert second.path == first.path
        assert Path(second.path).stat().st_mtime_ns == mtime

    def test_undecodable_artwork_fails_softly(self, tmp_path):
        media = tmp_path / "song.mp3"
        media.write_bytes(b"\x00")

        decision = CoverArtCache().apply(media, b"definitely not an image")

        assert decision.action is CoverArtAction.FAILED
        assert decision.path is None
        assert decision.error is ErrorCode.COVER_ART_WRITE_FAILED
        assert not sidecar_path(media).exists()

    def test_unwritable_sidecar_reports_write_failure(self, tmp_path, png_bytes):
        media = tmp_path / "missing_dir" / "song.mp3"

        decision = CoverArtCache().apply(media, png_bytes)

        assert decision.action is CoverArtAction.FAILED
        assert decision.error is ErrorCode.COVER_ART_WRITE_FAILED
        assert not sidecar_path(media).exists()
