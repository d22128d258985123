"""FIFO scheduling of folder scans on a single execution slot."""

from __future__ import annotations

from collections import deque
from concurrent.futures import ThreadPoolExecutor
import logging
import threading
from typing import Any, Callable, Protocol

from PySide6.QtCore import Qt

from mediaindexer.core.models import ScanOutcome, ScanRequest
from mediaindexer.core.state import IndexerObserver, NullObserver, StateController
from mediaindexer.errors import ERROR_MESSAGES, ErrorCode
from mediaindexer.workers.base_worker import BaseWorker

logger = logging.getLogger(__name__)

WorkerFactory = Callable[[ScanRequest, threading.Event], BaseWorker]


class Executor(Protocol):
    def submit(self, fn: Callable[..., Any], /, *args: Any) -> Any:
        ...


class ScanScheduler:
    """Queues scan requests and runs them one at a time.

    Requests are serviced in submission order. While a chain of requests is
    being worked off the state stays ACTIVE; once the queue drains the state
    resolves from the outcome of the last scan only.
    """

    def __init__(
        self,
        worker_factory: WorkerFactory,
        *,
        observer: IndexerObserver | None = None,
        state: StateController | None = None,
        executor: Executor | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._worker_factory = worker_factory
        self._observer: IndexerObserver = observer or NullObserver()
        self._state = state or StateController(self._observer)
        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="media-indexer"
        )
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._lock = threading.Lock()
        self._queue: deque[ScanRequest] = deque()
        self._current: ScanRequest | None = None
        self._running = False
        self._closed = False

    @property
    def state(self) -> StateController:
        return self._state

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def current(self) -> ScanRequest | None:
        with self._lock:
            return self._current

    def pending(self) -> list[ScanRequest]:
        with self._lock:
            return list(self._queue)

    def enqueue(self, request: ScanRequest) -> None:
        """Queue *request* and start it right away if the slot is free."""
        with self._lock:
            if self._closed:
                logger.warning("Indexer is shut down, ignoring request for %s", request.folder_path)
                return
            self._queue.append(request)
            if self._running:
                return
            request = self._take_next_locked()
        self._start(request)

    def on_worker_finished(self, outcome: ScanOutcome) -> None:
        """Chain the next request, or settle state once the queue is empty."""
        with self._lock:
            next_request = self._take_next_locked() if self._queue else None
        if next_request is not None:
            self._start(next_request)
            return

        # The slot stays taken until the state is settled, so requests arriving
        # from observer callbacks below are only queued.
        try:
            self._finish_chain(outcome)
        finally:
            with self._lock:
                self._running = False
                self._current = None
                next_request = self._take_next_locked() if self._queue and not self._closed else None
        if next_request is not None:
            self._start(next_request)

    def shutdown(self, wait: bool = True) -> None:
        """Abort the running scan and drop everything still queued."""
        with self._lock:
            self._closed = True
            dropped = len(self._queue)
            self._queue.clear()
        if dropped:
            logger.info("Dropped %d pending scan request(s) on shutdown", dropped)
        self._cancel_event.set()
        if self._owns_executor and isinstance(self._executor, ThreadPoolExecutor):
            self._executor.shutdown(wait=wait)

    def _finish_chain(self, outcome: ScanOutcome) -> None:
        logger.info("Scanning done")
        self._notify(self._observer.on_progress, 1.0)
        self._notify(self._observer.on_indexing_done)
        self._notify(self._state.resolve, outcome.succeeded)
        if not outcome.succeeded:
            reason = ERROR_MESSAGES[outcome.error or ErrorCode.OPERATION_FAILED]
            logger.warning(
                "Indexing chain ended with a failed scan of %s: %s", outcome.folder_path, reason
            )
            self._notify(
                self._observer.on_error,
                ErrorCode.CHAIN_FAILURE,
                f"{ERROR_MESSAGES[ErrorCode.CHAIN_FAILURE]} {reason}",
            )

    @staticmethod
    def _notify(callback: Callable[..., Any], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("Indexer observer raised in %s", getattr(callback, "__name__", callback))

    def _take_next_locked(self) -> ScanRequest:
        request = self._queue.popleft()
        self._current = request
        self._running = True
        return request

    def _start(self, request: ScanRequest) -> None:
        self._notify(self._state.activate)
        worker = self._worker_factory(request, self._cancel_event)
        worker.progress.connect(self._observer.on_progress, Qt.ConnectionType.DirectConnection)
        try:
            self._executor.submit(self._run_worker, worker, request)
        except RuntimeError:
            # The executor was shut down between taking the slot and submitting.
            logger.warning("Executor refused scan of %s", request.folder_path)
            self.on_worker_finished(ScanOutcome.failed(request.folder_path, ErrorCode.SCAN_ABORTED))

    def _run_worker(self, worker: BaseWorker, request: ScanRequest) -> None:
        try:
            outcome = worker.run()
        except Exception:
            logger.exception("Scan worker crashed")
            outcome = None
        if not isinstance(outcome, ScanOutcome):
            outcome = ScanOutcome.failed(request.folder_path)
        self.on_worker_finished(outcome)
