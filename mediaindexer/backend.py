"""Qt-facing media indexer: folder requests in, state/progress signals out."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Iterable

from PySide6.QtCore import QObject, Signal

from mediaindexer.core.cover_art import CoverArtCache
from mediaindexer.core.metadata import MetadataExtractor, MusicTagExtractor
from mediaindexer.core.models import IndexerState, ScanRequest
from mediaindexer.core.scheduler import Executor, ScanScheduler
from mediaindexer.core.state import StateController
from mediaindexer.core.tracklist import TrackListSink
from mediaindexer.core.walker import DEFAULT_AUDIO_EXTENSIONS, FolderWalker
from mediaindexer.errors import ErrorCode, UnsupportedOperationError
from mediaindexer.workers.scan_worker import ScanWorker

if TYPE_CHECKING:
    from mediaindexer.config.settings import IndexerSettings

logger = logging.getLogger(__name__)


class MediaIndexer(QObject):
    """Indexes media folders into a track list.

    Folder additions and removals are queued and scanned one after another on
    a background thread. Signals may be emitted from that thread; receivers in
    other threads get them through Qt's queued delivery.

    Usage:
        indexer = MediaIndexer(sink, media_folders=["/music"])
        indexer.state_changed.connect(on_state)
        indexer.indexing_done.connect(on_done)
    """

    state_changed = Signal(object)          # IndexerState
    progress_changed = Signal(float)        # fraction 0.0 - 1.0
    indexing_done = Signal()
    error_changed = Signal(object, str)     # ErrorCode, message
    initialization_done = Signal()

    def __init__(
        self,
        sink: TrackListSink,
        *,
        media_folders: Iterable[str] = (),
        extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS,
        cover_art_extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS,
        extractor: MetadataExtractor | None = None,
        cover_art: CoverArtCache | None = None,
        executor: Executor | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._sink = sink
        self._walker = FolderWalker(extensions)
        self._extractor = extractor or MusicTagExtractor()
        self._cover_art = cover_art or CoverArtCache()
        self._cover_art_extensions = tuple(cover_art_extensions)
        self._state = StateController(self)
        self._scheduler = ScanScheduler(
            self._create_worker,
            observer=self,
            state=self._state,
            executor=executor,
        )

        # Index right away, also when nobody has asked for it yet.
        for folder in media_folders:
            self.add_folder(folder)

    @classmethod
    def from_settings(
        cls,
        settings: IndexerSettings,
        sink: TrackListSink,
        **kwargs,
    ) -> MediaIndexer:
        return cls(
            sink,
            media_folders=settings.media_folders,
            extensions=settings.audio_extensions,
            cover_art_extensions=settings.cover_art_extensions,
            **kwargs,
        )

    # -- queries --

    @property
    def state(self) -> IndexerState:
        return self._state.state

    @property
    def scheduler(self) -> ScanScheduler:
        return self._scheduler

    @property
    def cancel_event(self) -> threading.Event:
        return self._scheduler.cancel_event

    # -- operations --

    def initialize(self) -> None:
        self._state.publish()
        self.initialization_done.emit()

    def add_folder(self, path: str) -> None:
        self._scheduler.enqueue(ScanRequest(folder_path=str(path), is_removal=False))

    def remove_folder(self, path: str) -> None:
        self._scheduler.enqueue(ScanRequest(folder_path=str(path), is_removal=True))

    def pause(self) -> None:
        self._unsupported("Pausing the indexing is not supported")

    def resume(self) -> None:
        self._unsupported("Resuming the indexing is not supported")

    def shutdown(self, wait: bool = True) -> None:
        self._scheduler.shutdown(wait=wait)

    # -- observer callbacks --

    def on_state_changed(self, state: IndexerState) -> None:
        self.state_changed.emit(state)

    def on_progress(self, fraction: float) -> None:
        self.progress_changed.emit(fraction)

    def on_indexing_done(self) -> None:
        self.indexing_done.emit()

    def on_error(self, code: ErrorCode, message: str) -> None:
        self.error_changed.emit(code, message)

    # -- internals --

    def _create_worker(self, request: ScanRequest, cancel_event: threading.Event) -> ScanWorker:
        return ScanWorker(
            request,
            self._sink,
            walker=self._walker,
            extractor=self._extractor,
            cover_art=self._cover_art,
            cover_art_extensions=self._cover_art_extensions,
            cancel_event=cancel_event,
        )

    def _unsupported(self, message: str) -> None:
        logger.warning(message)
        self.error_changed.emit(ErrorCode.UNSUPPORTED_OPERATION, message)
        raise UnsupportedOperationError(message)
