"""Tests for barrels.scanner."""

from __future__ import annotations

from barrels.kinds import BarrelKind
from barrels.scanner import (
    collection_name_for,
    expected_exports,
    export_entry_for,
    pascal_case,
    source_file_names,
)
from tests._fixtures.tree_builder import BarrelTreeBuilder


def test_export_entry_derives_aliases_from_stem() -> None:
    entry = export_entry_for("home.tsx")

    assert entry.file == "./home.tsx"
    assert entry.meta_alias == "homeMeta"
    assert entry.default_alias == "Home"
    assert entry.file_name == "home.tsx"


def test_pascal_case_only_touches_first_character() -> None:
    assert pascal_case("myPost") == "MyPost"
    assert pascal_case("my-post") == "My-post"
    assert pascal_case("") == ""


def test_expected_exports_filters_by_kind_and_skips_generated(tree: BarrelTreeBuilder) -> None:
    tree.write(
        {
            "posts/b.tsx": "export default 1;\n",
            "posts/a.ts": "export default 1;\n",
            "posts/c.jsx": "export default 1;\n",
            "posts/readme.md": "# notes\n",
            "posts/_index.ts": "// Auto-generated barrel file\n",
            "posts/nested/d.tsx": "export default 1;\n",
        }
    )

    ts_entries = expected_exports(tree.path("posts"), BarrelKind.TS)
    js_entries = expected_exports(tree.path("posts"), BarrelKind.JS)

    assert [entry.file for entry in ts_entries] == ["./a.ts", "./b.tsx"]
    assert [entry.file for entry in js_entries] == ["./c.jsx"]


def test_expected_exports_sorts_case_sensitively(tree: BarrelTreeBuilder) -> None:
    tree.write({"posts/b.tsx": "", "posts/B.tsx": "", "posts/a.tsx": ""})

    entries = expected_exports(tree.path("posts"), BarrelKind.TS)

    assert [entry.file_name for entry in entries] == ["B.tsx", "a.tsx", "b.tsx"]


def test_source_file_names_lists_every_supported_extension(tree: BarrelTreeBuilder) -> None:
    tree.write(
        {
            "mixed/a.ts": "",
            "mixed/b.jsx": "",
            "mixed/_index.js": "",
            "mixed/style.css": "",
        }
    )

    assert source_file_names(tree.path("mixed")) == ["a.ts", "b.jsx"]


def test_collection_name_for_produces_identifiers() -> None:
    assert collection_name_for("posts") == "posts"
    assert collection_name_for("Posts") == "Posts"
    assert collection_name_for("blog-posts") == "blogPosts"
    assert collection_name_for("my.blog posts") == "myBlogPosts"
    assert collection_name_for("2024-notes") == "_2024Notes"
    assert collection_name_for("---") == "_"
