"""Error codes and error handling utilities for the media indexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for indexer operations."""

    # File system errors
    FILE_NOT_FOUND = auto()
    FILE_ACCESS_DENIED = auto()
    FILE_UNREADABLE = auto()

    # Cover art
    COVER_ART_MISSING = auto()
    COVER_ART_WRITE_FAILED = auto()

    # Scheduling / operation errors
    UNSUPPORTED_OPERATION = auto()
    SCAN_ABORTED = auto()
    CHAIN_FAILURE = auto()
    OPERATION_FAILED = auto()

    # Track-list sink
    SINK_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.FILE_NOT_FOUND: "The file was not found. It may have been moved or deleted.",
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file permissions.",
    ErrorCode.FILE_UNREADABLE: "The file could not be opened as an audio file.",

    ErrorCode.COVER_ART_MISSING: "No cover art was found.",
    ErrorCode.COVER_ART_WRITE_FAILED: "The embedded cover art could not be saved.",

    ErrorCode.UNSUPPORTED_OPERATION: "This operation is not supported by the indexer.",
    ErrorCode.SCAN_ABORTED: "Scan aborted because the indexer is shutting down.",
    ErrorCode.CHAIN_FAILURE: "Indexing finished, but the last scan failed.",
    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",

    ErrorCode.SINK_FAILED: "The track list could not be updated.",
}


@dataclass
class IndexerError(Exception):
    """Base exception for the indexer with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or observer payloads."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
        }


class UnsupportedOperationError(IndexerError):
    """Raised by operations the indexer deliberately does not implement."""

    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.UNSUPPORTED_OPERATION, message=message)


class UnreadableFileError(IndexerError):
    """Raised by a metadata extractor when a file cannot be opened at all."""

    def __init__(self, path: Path, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.FILE_UNREADABLE, path=path, details=details or {})


def classify_exception(exc: Exception, path: Path | None = None) -> IndexerError:
    """Classify a generic exception into an IndexerError with appropriate code."""
    if isinstance(exc, IndexerError):
        return exc

    exc_name = type(exc).__name__
    exc_str = str(exc).lower()

    if "FileNotFoundError" in exc_name or "no such file" in exc_str:
        return IndexerError(ErrorCode.FILE_NOT_FOUND, path=path, details={"original": exc_str})
    if "PermissionError" in exc_name or "permission denied" in exc_str:
        return IndexerError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})

    # mutagen / music-tag failures while opening a file
    if (
        "HeaderNotFoundError" in exc_name
        or "NotImplementedError" in exc_name
        or "MutagenError" in exc_name
        or "mutagen type" in exc_str
        or "sync" in exc_str
        or "corrupt" in exc_str
        or "invalid" in exc_str
    ):
        return IndexerError(ErrorCode.FILE_UNREADABLE, path=path, details={"original": exc_str})

    if "connection" in exc_str or "refused" in exc_str or "timed out" in exc_str:
        return IndexerError(ErrorCode.SINK_FAILED, details={"original": exc_str})

    return IndexerError(
        ErrorCode.OPERATION_FAILED,
        message=f"{exc_name}: {exc}",
        path=path,
        details={"original": exc_str},
    )
