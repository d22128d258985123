"""Value types shared by the scheduler, the state controller and the workers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from mediaindexer.errors import ErrorCode


class IndexerState(Enum):
    """Coarse lifecycle state published to observers."""
    IDLE = "idle"
    ACTIVE = "active"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """A pending folder operation waiting in the scheduler queue."""
    folder_path: str
    is_removal: bool = False


def file_uri(path: str | Path) -> str:
    """Return the ``file://`` URI the track list expects for *path*."""
    return "file://" + str(Path(path).absolute())


@dataclass
class TrackRecord:
    """Metadata collected for one scanned file."""
    uri: str
    title: str = ""
    album: str = ""
    artist: str = ""
    genre: str = ""
    track_number: int = 0
    cover_art_path: str | None = None


@dataclass
class ScanOutcome:
    """Result of one worker run over a single folder."""
    succeeded: bool
    folder_path: str = ""
    uris: list[str] = field(default_factory=list)
    tracks: list[TrackRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: ErrorCode | None = None

    @classmethod
    def failed(
        cls, folder_path: str = "", error: ErrorCode = ErrorCode.OPERATION_FAILED
    ) -> ScanOutcome:
        return cls(succeeded=False, folder_path=folder_path, error=error)
