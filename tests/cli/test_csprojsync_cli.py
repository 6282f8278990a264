from __future__ import annotations

import json
from pathlib import Path

import pytest

from csprojsync import cli


def _make_project(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    csproj = root / "App.csproj"
    csproj.write_text(
        '<Project><ItemGroup><Compile Include="Program.cs" /></ItemGroup></Project>',
        encoding="utf-8",
    )
    return csproj


def _settings(tmp_path: Path, **values: object) -> Path:
    target = tmp_path / "settings.json"
    target.write_text(json.dumps(values), encoding="utf-8")
    return target


def test_cli_locate_prints_project(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    csproj = _make_project(tmp_path / "App")
    (tmp_path / "App" / "Models").mkdir()

    exit_code = cli.main(["locate", str(tmp_path / "App" / "Models" / "User.cs")])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == str(csproj)


def test_cli_check_reports_membership(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_project(tmp_path / "App")

    assert cli.main(["check", str(tmp_path / "App" / "Program.cs")]) == 0
    assert "included" in capsys.readouterr().out

    assert cli.main(["check", str(tmp_path / "App" / "Other.cs")]) == 1
    assert "not included" in capsys.readouterr().out


def test_cli_add_then_remove(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    csproj = _make_project(tmp_path / "App")
    target = tmp_path / "App" / "Views" / "Home.cs"

    assert cli.main(["add", str(target)]) == 0
    assert "Added" in capsys.readouterr().out
    assert b'<Compile Include="Views\\Home.cs" />' in csproj.read_bytes()

    assert cli.main(["add", str(target)]) == 0
    assert "no change" in capsys.readouterr().out

    assert cli.main(["remove", str(target)]) == 0
    assert "Removed" in capsys.readouterr().out
    assert b"Home.cs" not in csproj.read_bytes()


def test_cli_add_with_item_type(tmp_path: Path) -> None:
    csproj = _make_project(tmp_path / "App")

    assert cli.main(["add", str(tmp_path / "App" / "build.props"), "--item-type", "None"]) == 0
    assert b'<None Include="build.props" />' in csproj.read_bytes()


def test_cli_remove_directory(tmp_path: Path) -> None:
    csproj = _make_project(tmp_path / "App")
    cli.main(["add", str(tmp_path / "App" / "Views" / "Home.cs")])
    cli.main(["add", str(tmp_path / "App" / "Views" / "About.cs")])

    assert cli.main(["remove", "--directory", str(tmp_path / "App" / "Views")]) == 0
    assert b"Views" not in csproj.read_bytes()
    assert b"Program.cs" in csproj.read_bytes()


def test_cli_rename(tmp_path: Path) -> None:
    csproj = _make_project(tmp_path / "App")

    exit_code = cli.main(
        ["rename", str(tmp_path / "App" / "Program.cs"), str(tmp_path / "App" / "Main.cs")]
    )

    assert exit_code == 0
    payload = csproj.read_bytes()
    assert b'<Compile Include="Main.cs" />' in payload
    assert b"Program.cs" not in payload


def test_cli_remove_missing_item_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _make_project(tmp_path / "App")

    exit_code = cli.main(["remove", str(tmp_path / "App" / "Missing.cs")])

    assert exit_code == 1
    assert "error:" in capsys.readouterr().err


def test_cli_remove_missing_item_silent(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_project(tmp_path / "App")
    settings = _settings(tmp_path, silent_deletion=True)

    exit_code = cli.main(
        ["--settings", str(settings), "remove", str(tmp_path / "App" / "Missing.cs")]
    )

    assert exit_code == 0
    assert "no change" in capsys.readouterr().out


def test_cli_reports_missing_project(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings = _settings(tmp_path, csproj_pattern=r"^never-\d{9}\.csproj$")

    exit_code = cli.main(["--settings", str(settings), "locate", str(tmp_path / "loose.cs")])

    assert exit_code == 1
    assert "no csproj found" in capsys.readouterr().err


def test_cli_rejects_invalid_settings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings = _settings(tmp_path, indent=-2)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--settings", str(settings), "locate", str(tmp_path / "a.cs")])

    assert exc.value.code == 2
    assert "indent" in capsys.readouterr().err


def test_cli_requires_command(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([])

    assert exc.value.code == 2
