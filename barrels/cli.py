"""CLI entrypoints for barrels commands."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .config import ConfigError, load_config
from .discovery import find_configured_directories
from .kinds import BarrelKind
from .logging import configure_logging
from .models import BarrelResult
from .reconciler import init_barrel, update_barrels
from .studio import Studio, init_meta
from .watch import watch_barrels

_COMMANDS = {"init", "update", "watch", "list", "init-meta", "studio"}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_base_dir_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Base directory to search for barrels (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barrels",
        description="Keep barrel index files in sync with the components beside them.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Create an empty barrel file in each given directory.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    kind_group = init_parser.add_mutually_exclusive_group()
    kind_group.add_argument(
        "--ts",
        dest="kind",
        action="store_const",
        const=BarrelKind.TS,
        help="Create _index.ts collecting .ts/.tsx files.",
    )
    kind_group.add_argument(
        "--js",
        dest="kind",
        action="store_const",
        const=BarrelKind.JS,
        help="Create _index.js collecting .js/.jsx files.",
    )
    init_parser.add_argument("dirs", nargs="*", help="Directories to initialize.")

    update_parser = subparsers.add_parser(
        "update",
        help="Reconcile every barrel under the base directory.",
    )
    _add_verbose_option(update_parser, suppress_default=True)
    _add_base_dir_argument(update_parser)

    watch_parser = subparsers.add_parser(
        "watch",
        help="Reconcile barrels, then keep them updated as files change.",
    )
    _add_verbose_option(watch_parser, suppress_default=True)
    _add_base_dir_argument(watch_parser)
    watch_parser.add_argument(
        "--debounce",
        type=int,
        default=None,
        help="Milliseconds to wait after the last change before updating.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="Show discovered barrels with their files and metadata keys.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_base_dir_argument(list_parser)

    meta_parser = subparsers.add_parser(
        "init-meta",
        help="Add a meta export to source files in a directory that lack one.",
    )
    _add_verbose_option(meta_parser, suppress_default=True)
    meta_parser.add_argument("dir", help="Directory whose files receive the template.")
    meta_parser.add_argument(
        "--field",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template field; VALUE is read as YAML (repeatable, default: title=\"\").",
    )

    studio_parser = subparsers.add_parser(
        "studio",
        help="Serve the studio API for browsing and editing barrels.",
    )
    _add_verbose_option(studio_parser, suppress_default=True)
    _add_base_dir_argument(studio_parser)
    studio_parser.add_argument("-p", "--port", type=int, default=None, help="Port to bind.")
    studio_parser.add_argument("--host", default=None, help="Interface to bind.")

    return parser


def _normalize_argv(argv: List[str]) -> List[str]:
    """Treat ``barrels [basedir]`` as ``barrels update [basedir]``."""
    positional = [arg for arg in argv if not arg.startswith("-")]
    if any(arg in {"-h", "--help"} for arg in argv) and not positional:
        return argv
    if not positional:
        return argv + ["update"]
    if positional[0] not in _COMMANDS:
        index = argv.index(positional[0])
        return argv[:index] + ["update"] + argv[index:]
    return argv


def _parse_fields(parser: argparse.ArgumentParser, fields: List[str]) -> Dict[str, Any]:
    template: Dict[str, Any] = {}
    for field in fields:
        key, sep, raw = field.partition("=")
        if not sep or not key.strip():
            parser.exit(1, f"Invalid --field {field!r}; expected KEY=VALUE\n")
        try:
            value = yaml.safe_load(raw) if raw.strip() else ""
        except yaml.YAMLError:
            value = raw
        if not isinstance(value, (str, int, float, bool, list, dict, type(None))):
            # Dates and other YAML-only scalars stay as written.
            value = raw
        template[key.strip()] = value
    return template or {"title": ""}


def _existing_dir(parser: argparse.ArgumentParser, path: str) -> Path:
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_dir():
        parser.exit(1, f"Directory not found: {resolved}\n")
    return resolved


def _print_result(result: BarrelResult) -> None:
    print(f"Updated: {_relativize(result.path)} ({result.file_count} files)")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for barrels commands."""
    parser = _build_parser()
    args = parser.parse_args(_normalize_argv(list(sys.argv[1:] if argv is None else argv)))

    configure_logging(
        verbose=bool(args.verbose),
        timestamps=args.command in {"watch", "studio"},
    )

    try:
        if args.command == "init":
            _cmd_init(parser, args)
        elif args.command == "update":
            _cmd_update(parser, args)
        elif args.command == "watch":
            _cmd_watch(parser, args)
        elif args.command == "list":
            _cmd_list(parser, args)
        elif args.command == "init-meta":
            _cmd_init_meta(parser, args)
        elif args.command == "studio":
            _cmd_studio(parser, args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")


def _cmd_init(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if not args.dirs:
        parser.print_usage(sys.stderr)
        parser.exit(1, "Error: specify directories to initialize\n")
    kind = args.kind or load_config(Path.cwd()).default_kind
    for directory in args.dirs:
        resolved = Path(directory).expanduser().resolve()
        if not resolved.is_dir():
            print(f"Directory not found: {resolved}", file=sys.stderr)
            continue
        created, path = init_barrel(resolved, kind)
        if created:
            print(f"Created: {_relativize(path)}")
        else:
            print(f"Already exists: {_relativize(path)}")


def _cmd_update(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    base = _existing_dir(parser, args.path)
    results = update_barrels(base, load_config(base))
    if not results:
        print(f"No barrel files found in {base}")
        return
    for result in results:
        _print_result(result)


def _cmd_watch(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    base = _existing_dir(parser, args.path)
    config = load_config(base)
    if args.debounce is not None:
        config.watch.debounce_ms = max(args.debounce, 0)
    directories = find_configured_directories(base, config)
    if not directories:
        parser.exit(1, f"No barrel files found in {base}\n")

    watcher = watch_barrels(base, on_update=_print_result, config=config)
    print(f"\nWatching {len(watcher.directories)} directories for changes...")
    print("Press Ctrl+C to stop\n")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.close()


def _cmd_list(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    base = _existing_dir(parser, args.path)
    barrels = Studio(base).list_barrels()
    if not barrels:
        print(f"No barrel files found in {base}")
        return
    for info in barrels:
        print(f"{info.relative_path}/{info.barrel_file} ({len(info.files)} files)")
        for file in info.files:
            keys = ", ".join(file.meta) if file.meta else "(no meta)"
            print(f"  {file.name}: {keys}")


def _cmd_init_meta(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    directory = _existing_dir(parser, args.dir)
    added, skipped = init_meta(directory, _parse_fields(parser, args.field))
    for name in added:
        print(f"Added meta: {name}")
    for name in skipped:
        print(f"Skipped (already has meta): {name}")


def _cmd_studio(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    from .service import run_service

    base = _existing_dir(parser, args.path)
    config = load_config(base)
    run_service(
        base,
        host=args.host or config.studio.host,
        port=args.port or config.studio.port,
    )


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
