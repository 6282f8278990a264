"""Membership queries and item mutations on a project descriptor.

Items are matched by their ``Include`` attribute, which holds the file path
relative to the project directory using Windows separators::

    <ItemGroup>
      <Compile Include="Models\\User.cs" />
    </ItemGroup>

Example
-------
>>> from pathlib import Path
>>> from csprojsync.core.xmlio import parse_project
>>> csproj = Csproj(
...     fs_path=Path("/src/App/App.csproj"),
...     name="App.csproj",
...     xml=parse_project("<Project><ItemGroup /></Project>"),
... )
>>> add_file(csproj, Path("/src/App/Models/User.cs"), "Compile")
>>> has_file(csproj, Path("/src/App/Models/User.cs"))
True
>>> remove_file(csproj, Path("/src/App/Models"), directory=True)
True
>>> has_file(csproj, Path("/src/App/Models/User.cs"))
False
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import replace
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from .cache import ProjectCache, default_cache
from .locator import PatternLike, get_path
from .types import Csproj
from .xmlio import serialize_project

logger = logging.getLogger(__name__)

_ITEM_GROUP = "ItemGroup"
_INCLUDE = "Include"

PathLike = Union[str, Path]


def relative_to(csproj: Csproj, file_path: PathLike) -> str:
    """Return ``file_path`` relative to the project directory, ``\\`` separated."""

    relative = os.path.relpath(os.path.abspath(os.fspath(file_path)), csproj.directory)
    return relative.replace("/", "\\")


def _item_groups(root: ET.Element) -> List[ET.Element]:
    return root.findall(f"./{_ITEM_GROUP}")


def _iter_items(root: ET.Element) -> Iterator[Tuple[ET.Element, ET.Element]]:
    for group in _item_groups(root):
        for element in list(group):
            if isinstance(element.tag, str) and element.get(_INCLUDE) is not None:
                yield group, element


def find_item(csproj: Csproj, file_path: PathLike) -> Optional[ET.Element]:
    """Return the first item whose ``Include`` names ``file_path``."""

    relative = relative_to(csproj, file_path)
    for _, element in _iter_items(csproj.root):
        if element.get(_INCLUDE) == relative:
            return element
    return None


def has_file(csproj: Csproj, file_path: PathLike) -> bool:
    return find_item(csproj, file_path) is not None


def add_file(csproj: Csproj, file_path: PathLike, item_type: str) -> None:
    """Append an ``item_type`` element to the last ``ItemGroup``.

    A new ``ItemGroup`` is created under the root when the project has none.
    Membership is not checked; callers decide whether duplicates matter.
    """

    if not item_type:
        raise ValueError("item_type must be a non-empty element name")
    root = csproj.root
    groups = _item_groups(root)
    group = groups[-1] if groups else ET.SubElement(root, _ITEM_GROUP)
    element = ET.SubElement(group, item_type)
    element.set(_INCLUDE, relative_to(csproj, file_path))


def _is_under(include: str, directory: str) -> bool:
    if directory in ("", "."):
        return True
    prefix = directory.rstrip("\\") + "\\"
    return include == directory or include.startswith(prefix)


def remove_file(csproj: Csproj, file_path: PathLike, directory: bool = False) -> bool:
    """Remove the items naming ``file_path`` from every ``ItemGroup``.

    With ``directory=True`` every item at or below the directory is removed.
    Returns ``True`` when at least one element was removed.
    """

    relative = relative_to(csproj, file_path)
    matches = [
        (group, element)
        for group, element in _iter_items(csproj.root)
        if (
            _is_under(element.get(_INCLUDE, ""), relative)
            if directory
            else element.get(_INCLUDE) == relative
        )
    ]
    for group, element in matches:
        group.remove(element)
    if len(matches) > 1 and not directory:
        logger.warning(
            "Removed %s duplicate entries for %s from %s",
            len(matches),
            relative,
            csproj.name,
        )
    return bool(matches)


def persist(
    csproj: Csproj,
    indent: int = 2,
    cache: Optional[ProjectCache] = None,
) -> None:
    """Write the document back to disk and refresh the cache entry."""

    cache = cache if cache is not None else default_cache()
    payload = serialize_project(csproj.xml, indent=indent)
    csproj.fs_path.write_bytes(payload)
    logger.info("Wrote %s (%s bytes)", csproj.fs_path, len(payload))
    cache.store(csproj.fs_path, csproj.xml)


def for_file(
    file_path: PathLike,
    pattern: PatternLike | None = None,
    cache: Optional[ProjectCache] = None,
) -> Csproj:
    """Locate and load the project that owns ``file_path``.

    Raises:
        NoCsprojError: no project file between the file and the root.
    """

    cache = cache if cache is not None else default_cache()
    directory = os.path.dirname(os.path.abspath(os.fspath(file_path)))
    fs_path = get_path(directory, pattern)
    return Csproj(fs_path=fs_path, name=fs_path.name, xml=cache.load(fs_path))


def ensure_valid(csproj: Csproj, cache: Optional[ProjectCache] = None) -> Csproj:
    """Return a copy of ``csproj`` pointing at the cache's current tree."""

    cache = cache if cache is not None else default_cache()
    return replace(csproj, xml=cache.load(csproj.fs_path))
