"""Upward search for the project descriptor that owns a source file."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Union

from .types import NoCsprojError

logger = logging.getLogger(__name__)

DEFAULT_CSPROJ_PATTERN = r".*\.csproj$"

PatternLike = Union[str, re.Pattern[str]]


def compile_pattern(pattern: PatternLike | None) -> re.Pattern[str]:
    if pattern is None:
        pattern = DEFAULT_CSPROJ_PATTERN
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def _matching_entry(directory: Path, regex: re.Pattern[str]) -> Path | None:
    for entry in sorted(directory.iterdir(), key=lambda item: item.name):
        if regex.search(entry.name):
            return entry
    return None


def get_path(
    file_dir: Union[str, Path],
    pattern: PatternLike | None = None,
    walk_up: bool = True,
) -> Path:
    """Return the absolute path of the nearest project file.

    Args:
        file_dir: Directory to start from. Relative paths resolve against the
            current working directory. A directory that does not exist
            (yet, or any more) has no entries, so the search continues
            with its parent.
        pattern: Regular expression matched against directory entry names.
            Defaults to ``DEFAULT_CSPROJ_PATTERN``.
        walk_up: Continue into parent directories until the filesystem root.

    Raises:
        NoCsprojError: nothing matched.
    """

    regex = compile_pattern(pattern)
    directory = Path(os.path.abspath(file_dir))

    while True:
        match = _matching_entry(directory, regex) if directory.is_dir() else None
        if match is not None:
            logger.debug("Found project file %s", match)
            return match
        if not walk_up:
            raise NoCsprojError(f"No csproj found in current directory: {directory}")
        parent = directory.parent
        if parent == directory:
            raise NoCsprojError("Reached fs root, no csproj found")
        directory = parent
