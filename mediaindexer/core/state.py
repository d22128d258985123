"""Lifecycle state of the indexer and the observer interface it reports to."""

from __future__ import annotations

import threading
from typing import Protocol

from mediaindexer.core.models import IndexerState
from mediaindexer.errors import ErrorCode


class IndexerObserver(Protocol):
    """Receives indexer notifications. Calls may arrive from the worker thread."""

    def on_state_changed(self, state: IndexerState) -> None:
        ...

    def on_progress(self, fraction: float) -> None:
        ...

    def on_indexing_done(self) -> None:
        ...

    def on_error(self, code: ErrorCode, message: str) -> None:
        ...


class NullObserver:
    def on_state_changed(self, state: IndexerState) -> None:
        pass

    def on_progress(self, fraction: float) -> None:
        pass

    def on_indexing_done(self) -> None:
        pass

    def on_error(self, code: ErrorCode, message: str) -> None:
        pass


class StateController:
    """Holds the current IndexerState and publishes transitions.

    Setting the state it already holds is a no-op, so a chain of scans stays
    ACTIVE without repeated notifications.
    """

    def __init__(self, observer: IndexerObserver | None = None) -> None:
        self._lock = threading.Lock()
        self._state = IndexerState.IDLE
        self._observer: IndexerObserver = observer or NullObserver()

    @property
    def state(self) -> IndexerState:
        with self._lock:
            return self._state

    def set_state(self, state: IndexerState) -> bool:
        """Switch to *state*; return True when a transition happened."""
        with self._lock:
            if self._state is state:
                return False
            self._state = state
        self._observer.on_state_changed(state)
        return True

    def activate(self) -> bool:
        return self.set_state(IndexerState.ACTIVE)

    def resolve(self, succeeded: bool) -> bool:
        """Settle after a drained chain: IDLE on success, ERROR otherwise."""
        return self.set_state(IndexerState.IDLE if succeeded else IndexerState.ERROR)

    def publish(self) -> None:
        """Re-send the current state without changing it."""
        self._observer.on_state_changed(self.state)
