"""csprojsync package.

Finds the csproj that owns a source file, keeps its parsed XML in a
process-local cache and rewrites its ``ItemGroup`` entries as files are added,
removed or renamed.
"""

from __future__ import annotations

from .core import (
    Csproj,
    CsprojError,
    ItemNotFoundError,
    NoCsprojError,
    ProjectCache,
    ProjectParseError,
    add_file,
    ensure_valid,
    find_item,
    for_file,
    get_path,
    has_file,
    invalidate,
    invalidate_all,
    persist,
    relative_to,
    remove_file,
    serialize_project,
)
from .settings import SettingsError, SyncSettings, load_settings
from .sync import ProjectSync

__all__ = [
    "Csproj",
    "CsprojError",
    "ItemNotFoundError",
    "NoCsprojError",
    "ProjectCache",
    "ProjectParseError",
    "ProjectSync",
    "SettingsError",
    "SyncSettings",
    "add_file",
    "ensure_valid",
    "find_item",
    "for_file",
    "get_path",
    "has_file",
    "invalidate",
    "invalidate_all",
    "load_settings",
    "persist",
    "relative_to",
    "remove_file",
    "serialize_project",
]
