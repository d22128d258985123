"""Shared fixtures for the indexer tests."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Callable

import pytest
from PySide6.QtCore import QBuffer, QCoreApplication, QIODevice
from PySide6.QtGui import QColor, QImage

from mediaindexer.core.metadata import TrackTags
from mediaindexer.errors import UnreadableFileError


class ManualExecutor:
    """Single-slot executor that only runs jobs when the test says so."""

    def __init__(self) -> None:
        self.jobs: deque = deque()

    def submit(self, fn, /, *args):
        self.jobs.append((fn, args))

    def run_next(self) -> None:
        fn, args = self.jobs.popleft()
        fn(*args)

    def run_all(self) -> None:
        while self.jobs:
            self.run_next()


class StubExtractor:
    """Metadata extractor returning canned tags keyed by file name."""

    def __init__(
        self,
        tags: dict[str, TrackTags] | None = None,
        unreadable: set[str] | None = None,
        on_read: Callable[[Path, int], None] | None = None,
    ) -> None:
        self._tags = tags or {}
        self._unreadable = unreadable or set()
        self._on_read = on_read
        self.read_paths: list[Path] = []

    def read(self, path):
        path = Path(path)
        self.read_paths.append(path)
        if self._on_read is not None:
            self._on_read(path, len(self.read_paths))
        if path.name in self._unreadable:
            raise UnreadableFileError(path)
        return self._tags.get(path.name, TrackTags(title=path.stem))


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def png_bytes() -> bytes:
    image = QImage(4, 4, QImage.Format.Format_RGB32)
    image.fill(QColor(51, 102, 153))
    buf = QBuffer()
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buf, "PNG")
    buf.close()
    return buf.data().data()


def make_media_dir(root: Path, names: list[str]) -> Path:
    """Create empty placeholder files named *names* below *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for name in names:
        p = root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"\x00" * 16)
    return root


@pytest.fixture(name="make_media_dir")
def make_media_dir_fixture():
    return make_media_dir
