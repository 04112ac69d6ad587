"""Tests for barrels.studio."""

from __future__ import annotations

import pytest

from barrels.errors import BarrelNotFoundError, SourceFileNotFoundError
from barrels.kinds import PLACEHOLDER
from barrels.meta import extract_metadata
from barrels.studio import (
    Studio,
    barrel_payload,
    create_file,
    delete_file,
    init_meta,
    render_literal,
    update_file_meta,
)
from tests._fixtures.tree_builder import BarrelTreeBuilder, component


def _studio(tree: BarrelTreeBuilder) -> Studio:
    tree.write(
        {
            "content/posts/_index.ts": PLACEHOLDER,
            "content/posts/a.tsx": component('{ title: "A", tags: ["x"] }', "A"),
            "content/posts/b.tsx": "export default function B() { return null; }\n",
        }
    )
    return Studio(tree.path())


def test_render_literal_formats_objects_and_arrays() -> None:
    rendered = render_literal({"title": "Hi \"you\"", "tags": ["a", 1, None], "my-key": True})

    assert rendered == (
        "{\n"
        '  title: "Hi \\"you\\"",\n'
        '  tags: ["a", 1, null],\n'
        '  "my-key": true,\n'
        "}"
    )
    assert render_literal({}) == "{}"
    assert render_literal({"nested": {"a": 1}}) == "{\n  nested: {\n    a: 1,\n  },\n}"


def test_update_file_meta_replaces_only_the_initializer(tree: BarrelTreeBuilder) -> None:
    tree.write({"a.tsx": component('{ title: "Old" }', "A")})

    update_file_meta(tree.path("a.tsx"), {"title": "New", "order": 2})

    content = tree.read("a.tsx")
    assert content.startswith('export const meta = {\n  title: "New",\n  order: 2,\n};\n')
    assert "export default function A()" in content
    assert extract_metadata(tree.path("a.tsx")) == {"title": "New", "order": 2}


def test_update_file_meta_prepends_missing_declaration(tree: BarrelTreeBuilder) -> None:
    tree.write({"b.tsx": "export default function B() { return null; }\n"})

    update_file_meta(tree.path("b.tsx"), {"title": "B"})

    assert extract_metadata(tree.path("b.tsx")) == {"title": "B"}
    assert tree.read("b.tsx").endswith("export default function B() { return null; }\n")


def test_create_and_delete_file(tree: BarrelTreeBuilder) -> None:
    tree.write({"pages/.keep": ""})

    path = create_file(tree.path("pages"), "about", {"title": "About"})

    assert path.name == "about.tsx"
    assert "export default function About()" in path.read_text(encoding="utf-8")
    assert extract_metadata(path) == {"title": "About"}
    with pytest.raises(FileExistsError):
        create_file(tree.path("pages"), "about.tsx", {})
    with pytest.raises(ValueError):
        create_file(tree.path("pages"), "../escape", {})

    assert delete_file(tree.path("pages"), "about.tsx")
    assert not delete_file(tree.path("pages"), "about.tsx")


def test_init_meta_adds_template_to_files_without_meta(tree: BarrelTreeBuilder) -> None:
    tree.write(
        {
            "posts/a.tsx": component('{ title: "A" }'),
            "posts/b.jsx": "export default function B() { return null; }\n",
            "posts/_index.ts": PLACEHOLDER,
        }
    )

    added, skipped = init_meta(tree.path("posts"), {"title": "", "draft": True})

    assert added == ["b.jsx"]
    assert skipped == ["a.tsx"]
    assert extract_metadata(tree.path("posts/b.jsx")) == {"title": "", "draft": True}
    assert tree.read("posts/_index.ts") == PLACEHOLDER


def test_studio_lists_barrels_with_metadata(tree: BarrelTreeBuilder) -> None:
    studio = _studio(tree)

    barrels = studio.list_barrels()

    assert len(barrels) == 1
    info = barrels[0]
    assert info.relative_path == "content/posts"
    assert info.barrel_file == "_index.ts"
    assert [(file.name, file.meta) for file in info.files] == [
        ("a.tsx", {"title": "A", "tags": ["x"]}),
        ("b.tsx", {}),
    ]
    payload = barrel_payload(info)
    assert payload["files"][0]["name"] == "a.tsx"
    assert payload["dir"] == str(info.dir)


def test_studio_unknown_barrel_and_file(tree: BarrelTreeBuilder) -> None:
    studio = _studio(tree)

    with pytest.raises(BarrelNotFoundError):
        studio.get_barrel("content/missing")
    with pytest.raises(SourceFileNotFoundError):
        studio.update_file("content/posts", "nope.tsx", {"title": "x"})
    with pytest.raises(SourceFileNotFoundError):
        studio.delete_file("content/posts", "_index.ts")


def test_studio_mutations_reconcile_the_barrel(tree: BarrelTreeBuilder) -> None:
    studio = _studio(tree)

    result = studio.update_file("content/posts", "b.tsx", {"title": "B"})
    assert result.file_count == 2
    assert "  title: string;\n" in tree.read("content/posts/_index.ts")

    path, result = studio.create_file("content/posts", "c", {"title": "C"})
    assert path.name == "c.tsx"
    assert result.file_count == 3
    assert "cMeta" in tree.read("content/posts/_index.ts")

    result = studio.delete_file("content/posts", "a.tsx")
    assert result.file_count == 2
    assert not tree.path("content/posts/a.tsx").exists()
    assert "./a.tsx" not in tree.read("content/posts/_index.ts")
