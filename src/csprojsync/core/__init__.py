"""csprojsync core module exports."""

from .cache import ProjectCache, default_cache, invalidate, invalidate_all
from .locator import DEFAULT_CSPROJ_PATTERN, get_path
from .project import (
    add_file,
    ensure_valid,
    find_item,
    for_file,
    has_file,
    persist,
    relative_to,
    remove_file,
)
from .types import (
    Csproj,
    CsprojError,
    ItemNotFoundError,
    NoCsprojError,
    ProjectParseError,
)
from .xmlio import load_project, parse_project, serialize_project

__all__ = [
    "Csproj",
    "CsprojError",
    "DEFAULT_CSPROJ_PATTERN",
    "ItemNotFoundError",
    "NoCsprojError",
    "ProjectCache",
    "ProjectParseError",
    "add_file",
    "default_cache",
    "ensure_valid",
    "find_item",
    "for_file",
    "get_path",
    "has_file",
    "invalidate",
    "invalidate_all",
    "load_project",
    "parse_project",
    "persist",
    "relative_to",
    "remove_file",
    "serialize_project",
]
