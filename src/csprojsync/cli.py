"""Command-line entry point for keeping a project descriptor in sync.

Each subcommand maps to one ``ProjectSync`` operation so file watchers and
editor task runners can shell out to it:

* ``locate FILE`` prints the project that owns a file.
* ``check FILE`` exits 0 when the file is listed, 1 otherwise.
* ``add FILE`` / ``remove PATH`` / ``rename OLD NEW`` rewrite the project.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.cache import ProjectCache
from .core.types import Csproj, CsprojError
from .settings import SettingsError, load_settings
from .sync import ProjectSync


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csprojsync",
        description="Keep a csproj file in sync with files on disk.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="JSON settings file (default: ./.csprojsync.json when present).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    locate = commands.add_parser("locate", help="Print the project that owns FILE.")
    locate.add_argument("file", type=Path)

    check = commands.add_parser("check", help="Exit 0 when FILE is listed in its project.")
    check.add_argument("file", type=Path)

    add = commands.add_parser("add", help="Add FILE to its project.")
    add.add_argument("file", type=Path)
    add.add_argument(
        "--item-type",
        default=None,
        help="Element name for the new item (default: chosen by extension).",
    )

    remove = commands.add_parser("remove", help="Remove PATH from its project.")
    remove.add_argument("path", type=Path)
    remove.add_argument(
        "--directory",
        action="store_true",
        help="Remove every item below PATH.",
    )

    rename = commands.add_parser("rename", help="Point the item for OLD at NEW.")
    rename.add_argument("old", type=Path)
    rename.add_argument("new", type=Path)
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


def _report(action: str, csproj: Optional[Csproj], target: Path) -> None:
    if csproj is None:
        sys.stdout.write(f"{target}: no change\n")
    else:
        sys.stdout.write(f"{action} {target} in {csproj.fs_path}\n")


def _dispatch(args: argparse.Namespace, sync: ProjectSync) -> int:
    if args.command == "locate":
        sys.stdout.write(f"{sync.locate(args.file).fs_path}\n")
        return 0
    if args.command == "check":
        listed = sync.contains(args.file)
        sys.stdout.write(f"{args.file}: {'included' if listed else 'not included'}\n")
        return 0 if listed else 1
    if args.command == "add":
        _report("Added", sync.include(args.file, item_type=args.item_type), args.file)
        return 0
    if args.command == "remove":
        _report("Removed", sync.exclude(args.path, directory=args.directory), args.path)
        return 0
    if args.command == "rename":
        _report("Renamed", sync.rename(args.old, args.new), args.new)
        return 0
    raise AssertionError(f"unhandled command {args.command!r}")  # pragma: no cover


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    _configure_logging(args.verbose)

    try:
        settings = load_settings(args.settings)
    except SettingsError as exc:
        parser.error(str(exc))

    sync = ProjectSync(settings, cache=ProjectCache())
    try:
        return _dispatch(args, sync)
    except (CsprojError, OSError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())


def console_main() -> None:
    """Entry point for ``csprojsync`` console script."""

    sys.exit(main())
