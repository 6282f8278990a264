from __future__ import annotations

import re
import uuid
from pathlib import Path

import pytest

from csprojsync.core.locator import DEFAULT_CSPROJ_PATTERN, compile_pattern, get_path
from csprojsync.core.types import CsprojError, NoCsprojError


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<Project />", encoding="utf-8")
    return path


def test_get_path_finds_file_in_start_directory(tmp_path: Path) -> None:
    csproj = _touch(tmp_path / "App" / "App.csproj")

    assert get_path(tmp_path / "App") == csproj


def test_get_path_walks_up_to_nearest_ancestor(tmp_path: Path) -> None:
    _touch(tmp_path / "Outer.csproj")
    nearest = _touch(tmp_path / "src" / "App" / "App.csproj")
    nested = tmp_path / "src" / "App" / "Models" / "Entities"
    nested.mkdir(parents=True)

    assert get_path(nested) == nearest


def test_get_path_skips_non_matching_entries(tmp_path: Path) -> None:
    _touch(tmp_path / "App" / "App.csproj.user")
    _touch(tmp_path / "App" / "readme.txt")
    outer = _touch(tmp_path / "Solution.csproj")

    assert get_path(tmp_path / "App") == outer


def test_get_path_resolves_relative_directories(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    csproj = _touch(tmp_path / "App" / "App.csproj")
    (tmp_path / "App" / "Views").mkdir()
    monkeypatch.chdir(tmp_path)

    result = get_path(Path("App") / "Views")

    assert result.is_absolute()
    assert result == csproj


def test_get_path_prefers_first_match_by_name(tmp_path: Path) -> None:
    _touch(tmp_path / "B.csproj")
    first = _touch(tmp_path / "A.csproj")

    assert get_path(tmp_path) == first


def test_get_path_honours_custom_pattern(tmp_path: Path) -> None:
    _touch(tmp_path / "App.csproj")
    vbproj = _touch(tmp_path / "App.vbproj")

    assert get_path(tmp_path, r".*\.vbproj$") == vbproj
    assert get_path(tmp_path, re.compile(r"\.vbproj$")) == vbproj


def test_get_path_without_walk_up_raises(tmp_path: Path) -> None:
    _touch(tmp_path / "App.csproj")
    child = tmp_path / "child"
    child.mkdir()

    with pytest.raises(NoCsprojError) as exc:
        get_path(child, walk_up=False)

    assert "current directory" in str(exc.value)
    assert str(child) in str(exc.value)


def test_get_path_reports_filesystem_root(tmp_path: Path) -> None:
    pattern = rf"^missing-{uuid.uuid4().hex}\.csproj$"

    with pytest.raises(NoCsprojError) as exc:
        get_path(tmp_path, pattern)

    assert "Reached fs root" in str(exc.value)
    assert isinstance(exc.value, CsprojError)


def test_compile_pattern_defaults() -> None:
    regex = compile_pattern(None)

    assert regex.pattern == DEFAULT_CSPROJ_PATTERN
    assert regex.search("Web.csproj")
    assert not regex.search("Web.csproj.user")


def test_get_path_starts_from_missing_directory(tmp_path: Path) -> None:
    csproj = _touch(tmp_path / "App" / "App.csproj")
    missing = tmp_path / "App" / "Views" / "Shared"

    assert not missing.exists()
    assert get_path(missing) == csproj


def test_get_path_missing_directory_without_walk_up_raises(tmp_path: Path) -> None:
    _touch(tmp_path / "App.csproj")

    with pytest.raises(NoCsprojError):
        get_path(tmp_path / "gone", walk_up=False)
