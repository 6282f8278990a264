from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .core.locator import DEFAULT_CSPROJ_PATTERN

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = ".csprojsync.json"

DEFAULT_ITEM_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "*": "Content",
        ".cs": "Compile",
        ".ts": "TypeScriptCompile",
    }
)


class SettingsError(ValueError):
    """Raised when settings fail validation."""


def _compile(name: str, pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise SettingsError(f"Invalid {name} regular expression {pattern!r}: {exc}") from exc


def _normalise_item_types(item_type: Mapping[str, Any] | None) -> Mapping[str, str]:
    if item_type is None:
        return MappingProxyType(dict(DEFAULT_ITEM_TYPES))
    if not isinstance(item_type, Mapping):
        raise SettingsError("item_type must be a mapping of extension to element name.")

    normalised: dict[str, str] = {}
    for key, value in item_type.items():
        extension = str(key).strip().lower()
        element = str(value).strip() if value is not None else ""
        if not extension or not element:
            raise SettingsError(f"Invalid item_type entry: {key!r} -> {value!r}")
        if extension != "*" and not extension.startswith("."):
            extension = f".{extension}"
        normalised[extension] = element
    return MappingProxyType(normalised)


@dataclass
class SyncSettings:
    enabled: bool = True
    csproj_pattern: str = DEFAULT_CSPROJ_PATTERN
    item_type: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_ITEM_TYPES))
    include_pattern: str = ".*"
    exclude_pattern: Optional[str] = None
    silent_deletion: bool = False
    indent: int = 2

    def __post_init__(self) -> None:
        object.__setattr__(self, "enabled", bool(self.enabled))
        object.__setattr__(self, "silent_deletion", bool(self.silent_deletion))
        object.__setattr__(self, "csproj_pattern", str(self.csproj_pattern))
        object.__setattr__(self, "include_pattern", str(self.include_pattern))
        if self.exclude_pattern is not None:
            object.__setattr__(self, "exclude_pattern", str(self.exclude_pattern))
        object.__setattr__(self, "item_type", _normalise_item_types(self.item_type))

        try:
            indent = int(self.indent)
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"indent must be an integer, got {self.indent!r}") from exc
        if indent < 0:
            raise SettingsError("indent must be zero or greater.")
        object.__setattr__(self, "indent", indent)

        # Compile once so bad expressions surface at load time.
        _compile("csproj_pattern", self.csproj_pattern)
        _compile("include_pattern", self.include_pattern)
        _compile("exclude_pattern", self.exclude_pattern)

    @property
    def csproj_regex(self) -> re.Pattern[str]:
        return re.compile(self.csproj_pattern)

    @property
    def include_regex(self) -> re.Pattern[str]:
        return re.compile(self.include_pattern)

    @property
    def exclude_regex(self) -> Optional[re.Pattern[str]]:
        return _compile("exclude_pattern", self.exclude_pattern)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SyncSettings":
        if not isinstance(payload, Mapping):
            raise SettingsError("Settings payload must be a JSON object.")
        known = set(cls.__dataclass_fields__)
        unknown = sorted(str(key) for key in payload if key not in known)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        return cls(
            enabled=payload.get("enabled", True),
            csproj_pattern=payload.get("csproj_pattern") or DEFAULT_CSPROJ_PATTERN,
            item_type=payload.get("item_type"),
            include_pattern=payload.get("include_pattern") or ".*",
            exclude_pattern=payload.get("exclude_pattern"),
            silent_deletion=payload.get("silent_deletion", False),
            indent=payload.get("indent", 2),
        )

    def to_dict(self) -> Mapping[str, Any]:
        return {
            "enabled": self.enabled,
            "csproj_pattern": self.csproj_pattern,
            "item_type": dict(self.item_type),
            "include_pattern": self.include_pattern,
            "exclude_pattern": self.exclude_pattern,
            "silent_deletion": self.silent_deletion,
            "indent": self.indent,
        }


def load_settings(path: Union[str, Path, None] = None) -> SyncSettings:
    """Load settings from ``path`` or ``./.csprojsync.json``.

    An explicit ``path`` must exist. Without one, a missing settings file in
    the working directory yields the defaults.
    """

    if path is None:
        candidate = Path.cwd() / SETTINGS_FILENAME
        if not candidate.is_file():
            return SyncSettings()
    else:
        candidate = Path(os.path.expanduser(os.fspath(path)))
        if not candidate.is_file():
            raise SettingsError(f"Settings file does not exist: {candidate}")

    try:
        payload = json.loads(candidate.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Settings file {candidate} is not valid JSON: {exc}") from exc
    logger.debug("Loaded settings from %s", candidate)
    return SyncSettings.from_dict(payload)
