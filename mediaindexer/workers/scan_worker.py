"""Worker that indexes one folder and publishes its tracks."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Event
from typing import Iterable

from PySide6.QtCore import QObject

from mediaindexer.core.cover_art import CoverArtCache
from mediaindexer.core.metadata import MetadataExtractor, MusicTagExtractor
from mediaindexer.core.models import ScanOutcome, ScanRequest, TrackRecord, file_uri
from mediaindexer.core.tracklist import TrackListSink
from mediaindexer.core.walker import DEFAULT_AUDIO_EXTENSIONS, FolderWalker, normalize_extensions
from mediaindexer.errors import ERROR_MESSAGES, ErrorCode, UnreadableFileError, classify_exception
from mediaindexer.workers.base_worker import BaseWorker

logger = logging.getLogger(__name__)


class ScanWorker(BaseWorker):
    """Walks one folder, reads tags, caches cover art and refills the track list.

    The track list is cleared before the first file is processed and receives
    the whole batch at position 0 once every file has been handled. An aborted
    scan never appends.
    """

    def __init__(
        self,
        request: ScanRequest,
        sink: TrackListSink,
        *,
        walker: FolderWalker | None = None,
        extractor: MetadataExtractor | None = None,
        cover_art: CoverArtCache | None = None,
        cover_art_extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS,
        cancel_event: Event | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(cancel_event, parent)
        self._request = request
        self._sink = sink
        self._walker = walker or FolderWalker()
        self._extractor = extractor or MusicTagExtractor()
        self._cover_art = cover_art or CoverArtCache()
        self._cover_art_extensions = normalize_extensions(cover_art_extensions)

    @property
    def request(self) -> ScanRequest:
        return self._request

    def run(self) -> ScanOutcome:
        self.started.emit()
        try:
            outcome = self._scan()
        except Exception as exc:
            logger.exception("Scan of %s failed", self._request.folder_path)
            self.error.emit(str(exc))
            outcome = ScanOutcome.failed(self._request.folder_path, classify_exception(exc).code)
        self.finished.emit(outcome)
        return outcome

    def _scan(self) -> ScanOutcome:
        folder = self._request.folder_path
        if self._request.is_removal:
            # TODO: purge the folder's tracks instead once sinks can remove by URI.
            logger.warning("Removing %s re-indexes it; the track list is rebuilt from this folder", folder)
        logger.info("Scanning path: %s", folder)
        if not Path(folder).is_dir():
            logger.warning("Media folder %s does not exist or is not a directory", folder)

        files = self._walker.collect(folder)
        total = len(files)
        logger.info("total files: %d", total)

        self._sink.clear()

        uris: list[str] = []
        tracks: list[TrackRecord] = []
        skipped: list[str] = []
        if total == 0:
            self.progress.emit(1.0)

        for index, path in enumerate(files, start=1):
            if self._is_cancelled:
                logger.warning(
                    "%s (%s: %d of %d files indexed)",
                    ERROR_MESSAGES[ErrorCode.SCAN_ABORTED], folder, index - 1, total,
                )
                self.cancelled.emit()
                return ScanOutcome.failed(folder, ErrorCode.SCAN_ABORTED)

            logger.debug("Processing file: %s", path)
            record = self._index_file(path)
            if record is None:
                skipped.append(str(path))
            else:
                uris.append(record.uri)
                tracks.append(record)
            self.progress.emit(index / total)

        self._sink.add(uris, 0)
        return ScanOutcome(
            succeeded=True,
            folder_path=folder,
            uris=uris,
            tracks=tracks,
            skipped=skipped,
        )

    def _index_file(self, path: Path) -> TrackRecord | None:
        try:
            tags = self._extractor.read(path)
        except UnreadableFileError:
            logger.warning("Skipping unreadable file %s", path)
            return None

        record = TrackRecord(
            uri=file_uri(path),
            title=tags.title,
            album=tags.album,
            artist=tags.artist,
            genre=tags.genre,
            track_number=tags.track,
        )
        if path.suffix.lower() in self._cover_art_extensions:
            record.cover_art_path = self._cover_art.apply(path, tags.artwork_data).path
        return record
