"""Track-list sinks that receive the URIs produced by a scan."""

from __future__ import annotations

import itertools
import json
import threading
from typing import Any, Protocol, Sequence
from urllib.request import Request, urlopen

from mediaindexer import __version__
from mediaindexer.errors import ErrorCode, IndexerError, classify_exception


class TrackListSink(Protocol):
    def clear(self) -> None:
        ...

    def add(self, uris: Sequence[str], at_position: int = 0) -> None:
        ...


class InMemoryTrackList:
    """Thread-safe in-process track list.

    Every call is also recorded in ``calls`` so the command sequence a scan
    produced can be inspected.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._uris: list[str] = []
        self.calls: list[tuple[str, Any]] = []

    @property
    def uris(self) -> list[str]:
        with self._lock:
            return list(self._uris)

    def clear(self) -> None:
        with self._lock:
            self._uris.clear()
            self.calls.append(("clear", None))

    def add(self, uris: Sequence[str], at_position: int = 0) -> None:
        batch = list(uris)
        with self._lock:
            position = max(0, min(at_position, len(self._uris)))
            self._uris[position:position] = batch
            self.calls.append(("add", (batch, at_position)))


class MopidyTrackList:
    """Mopidy tracklist controller speaking JSON-RPC 2.0 over HTTP."""

    def __init__(self, url: str, *, timeout: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        return self._url

    def clear(self) -> None:
        self._call("core.tracklist.clear")

    def add(self, uris: Sequence[str], at_position: int = 0) -> None:
        self._call("core.tracklist.add", {"uris": list(uris), "at_position": at_position})

    def _call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        payload: dict[str, Any] = {"jsonrpc": "2.0", "id": next(self._ids), "method": method}
        if params is not None:
            payload["params"] = params
        req = Request(
            self._url,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"MediaIndexer/{__version__}",
            },
            method="POST",
        )
        try:
            with urlopen(req, timeout=self._timeout) as resp:
                body = resp.read()
        except Exception as exc:
            error = classify_exception(exc)
            raise IndexerError(
                ErrorCode.SINK_FAILED,
                message=f"Mopidy request {method} failed",
                details=error.details,
            ) from exc

        try:
            reply = json.loads(body.decode("utf-8")) if body else {}
        except ValueError as exc:
            raise IndexerError(
                ErrorCode.SINK_FAILED,
                message=f"Mopidy returned an invalid reply to {method}",
            ) from exc
        if isinstance(reply, dict) and reply.get("error"):
            err = reply["error"]
            message = err.get("message", "") if isinstance(err, dict) else str(err)
            raise IndexerError(
                ErrorCode.SINK_FAILED,
                message=f"Mopidy rejected {method}: {message}",
                details={"error": err},
            )
        return reply.get("result") if isinstance(reply, dict) else None
