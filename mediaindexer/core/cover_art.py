"""Sidecar cover-art caching for scanned media files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path

from PySide6.QtGui import QImage

from mediaindexer.errors import ERROR_MESSAGES, ErrorCode

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".png"
SIDECAR_FORMAT = "PNG"


class CoverArtAction(Enum):
    MISSING = "missing"
    WRITTEN = "written"
    EXISTING = "existing"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CoverArtDecision:
    action: CoverArtAction
    path: str | None = None
    error: ErrorCode | None = None


def sidecar_path(media_path: str | Path) -> Path:
    """Return the sidecar image path for *media_path* (``song.mp3.png``)."""
    media_path = Path(media_path)
    return media_path.with_name(media_path.name + SIDECAR_SUFFIX)


class CoverArtCache:
    """Decides per file whether embedded artwork is written next to the file.

    An existing sidecar is treated as authoritative and never rewritten.
    """

    def apply(self, media_path: str | Path, artwork_data: bytes | None) -> CoverArtDecision:
        if not artwork_data:
            logger.warning("%s (%s)", ERROR_MESSAGES[ErrorCode.COVER_ART_MISSING], media_path)
            return CoverArtDecision(CoverArtAction.MISSING, error=ErrorCode.COVER_ART_MISSING)

        target = sidecar_path(media_path)
        if target.exists():
            return CoverArtDecision(CoverArtAction.EXISTING, str(target))

        image = QImage()
        if not image.loadFromData(artwork_data) or image.isNull():
            logger.debug("Embedded cover art in %s could not be decoded", media_path)
            return self._failed(target)
        if not image.save(str(target), SIDECAR_FORMAT):
            logger.debug("QImage.save refused %s", target)
            return self._failed(target)
        return CoverArtDecision(CoverArtAction.WRITTEN, str(target))

    @staticmethod
    def _failed(target: Path) -> CoverArtDecision:
        logger.warning("%s (%s)", ERROR_MESSAGES[ErrorCode.COVER_ART_WRITE_FAILED], target)
        return CoverArtDecision(CoverArtAction.FAILED, error=ErrorCode.COVER_ART_WRITE_FAILED)
