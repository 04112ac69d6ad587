"""CLI parser and command behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from barrels.cli import _build_parser, _normalize_argv, main
from barrels.kinds import PLACEHOLDER, BarrelKind
from tests._fixtures.tree_builder import BarrelTreeBuilder, component


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "update"])
    assert args.verbose is True
    assert args.command == "update"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["update", "--verbose"])
    assert args.verbose is True
    assert args.command == "update"


def test_cli_init_kind_flags() -> None:
    parser = _build_parser()
    assert parser.parse_args(["init", "--js", "a"]).kind is BarrelKind.JS
    assert parser.parse_args(["init", "--ts", "a", "b"]).dirs == ["a", "b"]
    assert parser.parse_args(["init", "a"]).kind is None


def test_cli_studio_port_option() -> None:
    args = _build_parser().parse_args(["studio", "-p", "4000", "site"])
    assert args.port == 4000
    assert args.path == "site"


def test_normalize_argv_defaults_to_update() -> None:
    assert _normalize_argv([]) == ["update"]
    assert _normalize_argv(["src"]) == ["update", "src"]
    assert _normalize_argv(["-v", "src"]) == ["-v", "update", "src"]
    assert _normalize_argv(["watch", "src"]) == ["watch", "src"]


def test_main_update_prints_results(
    tree: BarrelTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    tree.write(
        {
            "posts/_index.ts": PLACEHOLDER,
            "posts/a.tsx": component('{ title: "A" }', "A"),
        }
    )

    main([str(tree.path())])

    out = capsys.readouterr().out
    assert "Updated:" in out
    assert "(1 files)" in out
    assert "aMeta" in tree.read("posts/_index.ts")


def test_main_update_reports_when_nothing_found(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main(["update", str(tmp_path)])

    assert "No barrel files found" in capsys.readouterr().out


def test_main_update_missing_directory_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["update", str(tmp_path / "missing")])

    assert excinfo.value.code == 1


def test_main_init_creates_and_reports_existing(
    tree: BarrelTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    tree.write({"posts/.keep": ""})

    main(["init", "--js", str(tree.path("posts"))])
    main(["init", str(tree.path("posts"))])

    out = capsys.readouterr().out
    assert "Created:" in out
    assert "Already exists:" in out
    assert tree.read("posts/_index.js") == PLACEHOLDER


def test_main_init_without_directories_exits() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["init"])

    assert excinfo.value.code == 1


def test_main_list_shows_files_and_keys(
    tree: BarrelTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    tree.write(
        {
            "posts/_index.ts": PLACEHOLDER,
            "posts/a.tsx": component('{ title: "A", order: 1 }', "A"),
        }
    )

    main(["list", str(tree.path())])

    out = capsys.readouterr().out
    assert "posts/_index.ts (1 files)" in out
    assert "  a.tsx: title, order" in out


def test_main_init_meta_parses_field_values(
    tree: BarrelTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    tree.write({"posts/a.tsx": "export default function A() { return null; }\n"})

    main(["init-meta", str(tree.path("posts")), "--field", "title=Draft", "--field", "order=2"])

    assert "Added meta: a.tsx" in capsys.readouterr().out
    content = tree.read("posts/a.tsx")
    assert content.startswith('export const meta = {\n  title: "Draft",\n  order: 2,\n};\n')


def test_main_rejects_invalid_config(tree: BarrelTreeBuilder) -> None:
    (tree.path() / ".barrels.yml").write_text("- not a mapping\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["update", str(tree.path())])

    assert excinfo.value.code == 1
