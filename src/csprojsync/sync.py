"""Keep a project descriptor in step with file add / remove / rename events.

``ProjectSync`` is the layer a file watcher or editor task calls into. It
applies the configured include/exclude filters, picks the item element type
from the file extension, mutates the owning project and persists it.

Example
-------
>>> import tempfile
>>> from pathlib import Path
>>> root = Path(tempfile.mkdtemp())
>>> _ = (root / "App.csproj").write_text("<Project><ItemGroup /></Project>", encoding="utf-8")
>>> sync = ProjectSync(cache=ProjectCache())
>>> sync.include(root / "Program.cs").name
'App.csproj'
>>> sync.contains(root / "Program.cs")
True
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import Optional, Union

from .core import project
from .core.cache import ProjectCache, default_cache
from .core.types import Csproj, ItemNotFoundError
from .settings import SyncSettings

logger = logging.getLogger(__name__)

_FALLBACK_ITEM_TYPE = "Content"

PathLike = Union[str, Path]


def _absolute(path: PathLike) -> Path:
    return Path(os.path.abspath(os.fspath(path)))


class ProjectSync:
    """Applies tracked-file events to the nearest project descriptor."""

    def __init__(
        self,
        settings: Optional[SyncSettings] = None,
        cache: Optional[ProjectCache] = None,
    ) -> None:
        self.settings = settings if settings is not None else SyncSettings()
        self.cache = cache if cache is not None else default_cache()

    def should_track(self, path: PathLike, directory: bool = False) -> bool:
        """Apply the enabled flag and the include/exclude expressions.

        ``include_pattern`` usually names file extensions, so it is not
        applied to directories.
        """

        if not self.settings.enabled:
            return False
        text = _absolute(path).as_posix()
        if not directory and not self.settings.include_regex.search(text):
            return False
        exclude = self.settings.exclude_regex
        if exclude is not None and exclude.search(text):
            return False
        return True

    def item_type_for(self, path: PathLike) -> str:
        mapping = self.settings.item_type
        extension = PurePath(os.fspath(path)).suffix.lower()
        if extension and extension in mapping:
            return mapping[extension]
        return mapping.get("*", _FALLBACK_ITEM_TYPE)

    def locate(self, path: PathLike) -> Csproj:
        return project.for_file(
            _absolute(path),
            self.settings.csproj_pattern,
            cache=self.cache,
        )

    def contains(self, path: PathLike) -> bool:
        return project.has_file(self.locate(path), _absolute(path))

    def _persist(self, csproj: Csproj) -> None:
        with self.cache.suspend_invalidation():
            project.persist(csproj, indent=self.settings.indent, cache=self.cache)

    def include(self, path: PathLike, item_type: Optional[str] = None) -> Optional[Csproj]:
        """Add ``path`` to its project unless filtered out or already present.

        Returns the project that was written, or ``None`` when nothing changed.
        """

        path = _absolute(path)
        if not self.should_track(path):
            logger.debug("Skipping untracked path %s", path)
            return None
        csproj = self.locate(path)
        if project.has_file(csproj, path):
            logger.debug("%s already listed in %s", path, csproj.name)
            return None
        element_type = item_type or self.item_type_for(path)
        project.add_file(csproj, path, element_type)
        self._persist(csproj)
        logger.info("Added %s as %s to %s", path, element_type, csproj.name)
        return csproj

    def _missing(self, path: Path, csproj: Csproj) -> None:
        if self.settings.silent_deletion:
            logger.debug("%s not listed in %s, ignoring", path, csproj.name)
            return
        raise ItemNotFoundError(path, csproj.fs_path)

    def exclude(self, path: PathLike, directory: bool = False) -> Optional[Csproj]:
        """Remove ``path`` (or everything below it) from its project.

        Raises:
            ItemNotFoundError: nothing matched and ``silent_deletion`` is off.
        """

        path = _absolute(path)
        if not self.should_track(path, directory=directory):
            logger.debug("Skipping untracked path %s", path)
            return None
        csproj = self.locate(path)
        if not project.remove_file(csproj, path, directory=directory):
            self._missing(path, csproj)
            return None
        self._persist(csproj)
        logger.info("Removed %s from %s", path, csproj.name)
        return csproj

    def rename(self, old_path: PathLike, new_path: PathLike) -> Optional[Csproj]:
        """Replace the item for ``old_path`` with one for ``new_path``.

        The new item keeps the element type of the old one. Both paths must
        belong to the same project; a move across projects is handled as an
        exclude followed by an include. An untracked ``old_path`` is skipped
        the same way ``exclude`` skips it, leaving only the include of
        ``new_path``.
        """

        if not self.settings.enabled:
            return None
        old_path = _absolute(old_path)
        new_path = _absolute(new_path)
        if not self.should_track(old_path):
            logger.debug("Skipping untracked path %s", old_path)
            return self.include(new_path)
        old_project = self.locate(old_path)
        new_project = self.locate(new_path)
        if old_project.fs_path != new_project.fs_path:
            self.exclude(old_path)
            return self.include(new_path)

        csproj = old_project
        element = project.find_item(csproj, old_path)
        if element is None:
            self._missing(old_path, csproj)
            return None
        element_type = str(element.tag)
        project.remove_file(csproj, old_path)
        if self.should_track(new_path) and not project.has_file(csproj, new_path):
            project.add_file(csproj, new_path, element_type)
        self._persist(csproj)
        logger.info("Renamed %s to %s in %s", old_path, new_path, csproj.name)
        return csproj

    def project_changed(self, path: PathLike) -> None:
        """Drop the cached tree for a project file changed on disk."""

        self.cache.invalidate(path)
