"""Walk directories and find audio files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

DEFAULT_AUDIO_EXTENSIONS = frozenset({".mp3"})


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lower-case extensions and make sure each one starts with a dot."""
    cleaned: set[str] = set()
    for ext in extensions:
        value = str(ext).strip().lower()
        if not value:
            continue
        if not value.startswith("."):
            value = "." + value
        cleaned.add(value)
    return frozenset(cleaned)


class FolderWalker:
    """Finds candidate media files below a root directory.

    Directories and file names are visited in sorted order so that two walks
    over an unchanged tree yield the same sequence.
    """

    def __init__(self, extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS) -> None:
        self._extensions = normalize_extensions(extensions)

    @property
    def extensions(self) -> frozenset[str]:
        return self._extensions

    def matches(self, path: str | Path) -> bool:
        return Path(path).suffix.lower() in self._extensions

    def walk(self, root: str | Path) -> Iterator[Path]:
        """Yield matching files one at a time."""
        for dirpath, dirnames, filenames in os.walk(Path(root)):
            dirnames.sort()
            for fname in sorted(filenames):
                p = Path(dirpath) / fname
                if self.matches(p) and p.is_file():
                    yield p

    def collect(self, root: str | Path) -> list[Path]:
        """Return all matching files under *root*."""
        return list(self.walk(root))
