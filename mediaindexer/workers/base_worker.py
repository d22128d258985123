"""Base worker class with standard signals for background operations."""

from __future__ import annotations

from threading import Event

from PySide6.QtCore import QObject, Signal


class BaseWorker(QObject):
    """Base class for background workers.

    Workers are plain QObjects whose ``run`` is executed on a worker thread.
    Slots that must observe progress while the scan is running should be
    connected with ``Qt.ConnectionType.DirectConnection``.

    A cancellation event may be shared between workers so that one shutdown
    request stops whichever worker is currently running.
    """

    started = Signal()
    progress = Signal(float)            # fraction 0.0 - 1.0
    finished = Signal(object)           # result data
    error = Signal(str)                 # error message
    cancelled = Signal()

    def __init__(self, cancel_event: Event | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cancel_event = cancel_event if cancel_event is not None else Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def _is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self):
        """Override in subclass. Called on the worker thread."""
        raise NotImplementedError
