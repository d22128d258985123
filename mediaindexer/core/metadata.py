"""Read audio tags and embedded cover art via music-tag."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import music_tag

from mediaindexer.errors import UnreadableFileError, classify_exception


@dataclass
class TrackTags:
    """Tag fields the indexer cares about, plus the first embedded image."""
    title: str = ""
    album: str = ""
    artist: str = ""
    genre: str = ""
    track: int = 0
    artwork_data: bytes | None = None

    @property
    def has_artwork(self) -> bool:
        return bool(self.artwork_data)


class MetadataExtractor(Protocol):
    def read(self, path: str | Path) -> TrackTags:
        """Return tags for *path*; raise UnreadableFileError if it cannot be opened."""
        ...


def _coerce_artwork_bytes(value: Any) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return data or None
    if callable(value):
        try:
            return _coerce_artwork_bytes(value())
        except Exception:
            return None
    try:
        data = bytes(value)
    except Exception:
        return None
    return data or None


def _str(f: Any, key: str) -> str:
    try:
        val = f[key].first
        return str(val) if val is not None else ""
    except Exception:
        return ""


def _int(f: Any, key: str) -> int:
    try:
        val = f[key].first
        if val is None:
            return 0
        return max(int(val), 0)
    except Exception:
        return 0


class MusicTagExtractor:
    """Reads tags for audio files using music-tag."""

    def read(self, path: str | Path) -> TrackTags:
        """Read tags from an audio file.

        Individual fields that cannot be decoded come back empty.

        Raises:
            UnreadableFileError: If the file cannot be opened as audio at all.
        """
        path = Path(path)
        try:
            f = music_tag.load_file(str(path))
        except Exception as exc:
            error = classify_exception(exc, path)
            raise UnreadableFileError(path, details=error.details) from exc
        if f is None:
            raise UnreadableFileError(path)

        artwork_data: bytes | None = None
        try:
            aw = f["artwork"].first
            if aw is not None:
                artwork_data = _coerce_artwork_bytes(getattr(aw, "raw", None))
        except Exception:
            artwork_data = None

        return TrackTags(
            title=_str(f, "tracktitle"),
            album=_str(f, "album"),
            artist=_str(f, "artist"),
            genre=_str(f, "genre"),
            track=_int(f, "tracknumber"),
            artwork_data=artwork_data,
        )
