"""Process-local cache of parsed project documents keyed by absolute path."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from .xmlio import load_project

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _key(path: PathLike) -> str:
    return os.path.abspath(os.fspath(path))


class ProjectCache:
    """Maps absolute project paths to their parsed ``ElementTree``.

    Entries are evicted with :meth:`invalidate` (one file) or
    :meth:`invalidate_all`. While :meth:`suspend_invalidation` is active,
    single-file invalidation is ignored so a watcher reacting to our own
    write does not drop the tree that was just persisted.

    Example
    -------
    >>> cache = ProjectCache()
    >>> cache.store("/tmp/App.csproj", ET.ElementTree(ET.Element("Project")))
    >>> "/tmp/App.csproj" in cache
    True
    >>> with cache.suspend_invalidation():
    ...     cache.invalidate("/tmp/App.csproj")
    >>> len(cache)
    1
    >>> cache.invalidate_all()
    >>> len(cache)
    0
    """

    def __init__(self) -> None:
        self._entries: Dict[str, ET.ElementTree] = {}
        self._suspended = 0

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return _key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def invalidation_enabled(self) -> bool:
        return self._suspended == 0

    def get(self, path: PathLike) -> Optional[ET.ElementTree]:
        return self._entries.get(_key(path))

    def store(self, path: PathLike, tree: ET.ElementTree) -> None:
        self._entries[_key(path)] = tree

    def load(self, path: PathLike) -> ET.ElementTree:
        """Return the cached tree for ``path``, parsing the file on a miss."""

        key = _key(path)
        tree = self._entries.get(key)
        if tree is not None:
            logger.debug("Project cache hit: %s", key)
            return tree
        tree = load_project(key)
        self._entries[key] = tree
        return tree

    def invalidate(self, path: PathLike) -> None:
        if not self.invalidation_enabled:
            logger.debug("Invalidation suspended, keeping %s", path)
            return
        self._entries.pop(_key(path), None)

    def invalidate_all(self) -> None:
        self._entries.clear()

    @contextmanager
    def suspend_invalidation(self) -> Iterator["ProjectCache"]:
        self._suspended += 1
        try:
            yield self
        finally:
            self._suspended -= 1


_DEFAULT_CACHE = ProjectCache()


def default_cache() -> ProjectCache:
    return _DEFAULT_CACHE


def invalidate(path: PathLike) -> None:
    """Evict ``path`` from the shared cache."""

    _DEFAULT_CACHE.invalidate(path)


def invalidate_all() -> None:
    _DEFAULT_CACHE.invalidate_all()
