"""Indexer settings via QSettings."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from PySide6.QtCore import QSettings, QStandardPaths

from mediaindexer.core.walker import DEFAULT_AUDIO_EXTENSIONS, normalize_extensions

logger = logging.getLogger(__name__)

MEDIA_FOLDER_ENV = "MEDIAINDEXER_LOCAL_MEDIA_FOLDER"


def _music_locations() -> list[str]:
    return list(QStandardPaths.standardLocations(QStandardPaths.StandardLocation.MusicLocation))


def _string_list(raw: object) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw] if raw.strip() else []
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw if str(item).strip()]
    return []


class IndexerSettings:
    """Wraps QSettings for persistent indexer configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("MediaIndexer", "MediaIndexer")

    # -- media folders --

    @property
    def media_folders(self) -> list[str]:
        """Folders indexed at startup.

        The environment override wins over stored folders, which win over the
        platform music locations.
        """
        custom = os.environ.get(MEDIA_FOLDER_ENV, "").strip()
        if custom:
            logger.info("%s environment variable is set to: %s", MEDIA_FOLDER_ENV, custom)
            return [custom]
        stored = self.stored_media_folders
        if stored:
            return stored
        folders = _music_locations()
        logger.info("Searching for music files in the following locations: %s", folders)
        return list(folders)

    @property
    def stored_media_folders(self) -> list[str]:
        return _string_list(self._qs.value("indexer/media_folders", []))

    @stored_media_folders.setter
    def stored_media_folders(self, value: list[str]) -> None:
        self._qs.setValue("indexer/media_folders", [str(v) for v in value if str(v).strip()])

    # -- file types --

    @property
    def audio_extensions(self) -> frozenset[str]:
        raw = _string_list(self._qs.value("indexer/audio_extensions", []))
        return normalize_extensions(raw) or DEFAULT_AUDIO_EXTENSIONS

    @audio_extensions.setter
    def audio_extensions(self, value: list[str]) -> None:
        self._qs.setValue("indexer/audio_extensions", sorted(normalize_extensions(value)))

    @property
    def cover_art_extensions(self) -> frozenset[str]:
        raw = _string_list(self._qs.value("indexer/cover_art_extensions", []))
        return normalize_extensions(raw) or DEFAULT_AUDIO_EXTENSIONS

    @cover_art_extensions.setter
    def cover_art_extensions(self, value: list[str]) -> None:
        self._qs.setValue("indexer/cover_art_extensions", sorted(normalize_extensions(value)))

    # -- track list --

    @property
    def mopidy_url(self) -> str:
        raw = self._qs.value("tracklist/mopidy_url", "", type=str)
        return (raw or "").strip()

    @mopidy_url.setter
    def mopidy_url(self, value: str) -> None:
        self._qs.setValue("tracklist/mopidy_url", (value or "").strip())

    # -- helpers --

    def sync(self) -> None:
        self._qs.sync()

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "mediaindexer"
