"""Shared data structures and error types for csprojsync core.

Example
-------
>>> import xml.etree.ElementTree as ET
>>> from pathlib import Path
>>> tree = ET.ElementTree(ET.Element("Project"))
>>> csproj = Csproj(fs_path=Path("/src/App/App.csproj"), name="App.csproj", xml=tree)
>>> csproj.directory.as_posix()
'/src/App'
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class CsprojError(Exception):
    """Base class for project descriptor failures."""


class NoCsprojError(CsprojError):
    """Raised when no project file matches while searching for one."""


class ProjectParseError(CsprojError):
    """Represents a project file that could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {self.reason}")

    def __repr__(self) -> str:  # pragma: no cover - trivial wrapper
        return f"ProjectParseError(path={str(self.path)!r}, reason={self.reason!r})"


class ItemNotFoundError(CsprojError):
    """Raised when a removal targets a path the project does not include."""

    def __init__(self, path: Path, project: Optional[Path] = None) -> None:
        self.path = Path(path)
        self.project = Path(project) if project is not None else None
        if self.project is not None:
            message = f"{self.path} not found in {self.project.name}"
        else:
            message = f"{self.path} not found in project"
        super().__init__(message)


@dataclass
class Csproj:
    """Reference to a project descriptor and its parsed document."""

    fs_path: Path
    name: str
    xml: ET.ElementTree

    def __post_init__(self) -> None:
        self.fs_path = Path(self.fs_path)

    @property
    def directory(self) -> Path:
        return self.fs_path.parent

    @property
    def root(self) -> ET.Element:
        return self.xml.getroot()
