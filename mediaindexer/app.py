"""QCoreApplication bootstrap for headless indexing."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import signal
import sys

from PySide6.QtCore import QCoreApplication, QTimer

from mediaindexer.backend import MediaIndexer
from mediaindexer.config.settings import IndexerSettings
from mediaindexer.core.models import IndexerState
from mediaindexer.core.tracklist import InMemoryTrackList, MopidyTrackList, TrackListSink


def _configure_logger(settings: IndexerSettings) -> logging.Logger:
    logger = logging.getLogger("mediaindexer")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    log_dir = settings.app_data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "indexer.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_sink(settings: IndexerSettings) -> TrackListSink:
    """Return the Mopidy track list when configured, else an in-memory one."""
    if settings.mopidy_url:
        return MopidyTrackList(settings.mopidy_url)
    return InMemoryTrackList()


def run_app() -> int:
    """Index the configured folders once and exit."""
    app = QCoreApplication(sys.argv)
    app.setApplicationName("MediaIndexer")
    app.setOrganizationName("MediaIndexer")
    settings = IndexerSettings()
    logger = _configure_logger(settings)

    sink = build_sink(settings)
    indexer = MediaIndexer.from_settings(settings, sink)
    logger.info("startup folders=%s sink=%s", settings.media_folders, type(sink).__name__)

    indexer.indexing_done.connect(app.quit)
    app.aboutToQuit.connect(indexer.shutdown)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    # Wake the event loop periodically so Python signal handlers get to run.
    timer = QTimer()
    timer.start(250)
    timer.timeout.connect(lambda: None)

    if not indexer.scheduler.is_running:
        QTimer.singleShot(0, app.quit)

    app.exec()
    logger.info("finished with state %s", indexer.state.name)
    return 0 if indexer.state is IndexerState.IDLE else 1
