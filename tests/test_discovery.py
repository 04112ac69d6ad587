"""Tests for barrels.discovery."""

from __future__ import annotations

from barrels.config import load_config
from barrels.discovery import (
    existing_barrel_kind,
    find_barrel_directories,
    find_configured_directories,
    infer_kind,
    majority_kind,
)
from barrels.kinds import PLACEHOLDER, BarrelKind
from tests._fixtures.tree_builder import BarrelTreeBuilder, component


def _layout(tree: BarrelTreeBuilder) -> None:
    tree.write(
        {
            "posts/_index.ts": PLACEHOLDER,
            "posts/drafts/_index.js": PLACEHOLDER,
            "pages/home.jsx": component('{ title: "Home" }'),
            "lib/util.ts": "export const x = 1;\n",
            "node_modules/pkg/_index.ts": PLACEHOLDER,
            "vendor/_index.ts": PLACEHOLDER,
        }
    )


def test_find_barrel_directories_walks_pre_order(tree: BarrelTreeBuilder) -> None:
    _layout(tree)

    found = find_barrel_directories(tree.path())

    assert [(item.dir.name, item.kind) for item in found] == [
        ("pages", BarrelKind.JS),
        ("posts", BarrelKind.TS),
        ("drafts", BarrelKind.JS),
        ("vendor", BarrelKind.TS),
    ]


def test_find_barrel_directories_without_convention(tree: BarrelTreeBuilder) -> None:
    _layout(tree)

    found = find_barrel_directories(tree.path(), by_convention=False, excluded_dirs=["vendor"])

    assert [item.dir.name for item in found] == ["posts", "drafts"]


def test_find_barrel_directories_missing_base(tree: BarrelTreeBuilder) -> None:
    assert find_barrel_directories(tree.path("missing")) == []


def test_find_configured_directories_uses_config(tree: BarrelTreeBuilder) -> None:
    _layout(tree)
    (tree.path() / ".barrels.yml").write_text(
        "exclude_dirs: [vendor]\ndiscover_by_convention: false\n", encoding="utf-8"
    )

    found = find_configured_directories(tree.path(), load_config(tree.path()))

    assert [item.dir.name for item in found] == ["posts", "drafts"]


def test_existing_barrel_kind_prefers_typescript(tree: BarrelTreeBuilder) -> None:
    tree.write({"both/_index.ts": PLACEHOLDER, "both/_index.js": PLACEHOLDER, "none/a.ts": ""})

    assert existing_barrel_kind(tree.path("both")) is BarrelKind.TS
    assert existing_barrel_kind(tree.path("none")) is None


def test_majority_kind_breaks_ties_towards_typescript() -> None:
    assert majority_kind(["a.js", "b.ts"]) is BarrelKind.TS
    assert majority_kind(["a.js", "b.jsx", "c.tsx"]) is BarrelKind.JS
    assert majority_kind([]) is BarrelKind.TS


def test_infer_kind_requires_a_meta_export(tree: BarrelTreeBuilder) -> None:
    tree.write(
        {
            "with/a.tsx": component('{ title: "A" }'),
            "without/a.tsx": "export default function A() { return null; }\n",
        }
    )

    assert infer_kind(tree.path("with")) is BarrelKind.TS
    assert infer_kind(tree.path("without")) is None
