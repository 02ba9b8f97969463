"""Lazy file collection views.

A FileCollection is a read-only, lazily evaluated sequence of paths. The
contents are stable and free of duplicates, and are only computed when a
consumer iterates the collection (or asks for its files).
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Union

logger = logging.getLogger("nativedeps.files")

PathLike = Union[str, Path]


def unique_paths(paths: Iterable[PathLike]) -> List[Path]:
    """Return paths as Path objects in first-seen order without duplicates."""
    seen = set()
    result: List[Path] = []
    for item in paths:
        path = Path(item)
        if path in seen:
            continue
        seen.add(path)
        result.append(path)
    return result


class FileCollection(ABC):
    """Read-only view over a set of files or directories."""

    @abstractmethod
    def get_files(self) -> List[Path]:
        """Evaluate the collection and return its paths."""
        pass

    def __iter__(self) -> Iterator[Path]:
        return iter(self.get_files())

    def __len__(self) -> int:
        return len(self.get_files())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, (str, Path)):
            return False
        return Path(item) in self.get_files()

    def plus(self, other: "FileCollection") -> "FileCollection":
        """Return the lazy union of this collection and ``other``."""
        return UnionFileCollection(self, other)

    def __add__(self, other: "FileCollection") -> "FileCollection":
        return self.plus(other)


class FixedFileCollection(FileCollection):
    """Collection over a fixed list of paths."""

    def __init__(self, paths: Iterable[PathLike] = ()) -> None:
        self._paths = unique_paths(paths)

    def get_files(self) -> List[Path]:
        return list(self._paths)

    def __repr__(self) -> str:
        return f"FixedFileCollection({[str(p) for p in self._paths]!r})"


class LazyFileCollection(FileCollection):
    """Collection whose contents come from a supplier called on first read.

    The supplier runs at most once when ``cache`` is enabled. Concurrent
    first reads are serialized so the supplier never runs twice.
    """

    def __init__(
        self,
        supplier: Callable[[], Iterable[PathLike]],
        description: str = "lazy",
        cache: bool = True,
    ) -> None:
        self._supplier = supplier
        self._description = description
        self._cache = cache
        self._resolved: Optional[List[Path]] = None
        self._lock = threading.Lock()

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    def get_files(self) -> List[Path]:
        if not self._cache:
            return unique_paths(self._supplier())
        with self._lock:
            if self._resolved is None:
                logger.debug("Evaluating file collection: %s", self._description)
                self._resolved = unique_paths(self._supplier())
            return list(self._resolved)

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved else "unresolved"
        return f"LazyFileCollection({self._description!r}, {state})"


class UnionFileCollection(FileCollection):
    """Ordered, de-duplicated union of several collections."""

    def __init__(self, *collections: FileCollection) -> None:
        self._collections = collections

    def get_files(self) -> List[Path]:
        merged: List[Path] = []
        for collection in self._collections:
            merged.extend(collection.get_files())
        return unique_paths(merged)


__all__ = [
    "FileCollection",
    "FixedFileCollection",
    "LazyFileCollection",
    "UnionFileCollection",
    "unique_paths",
]
