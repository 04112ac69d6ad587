"""Barrel browsing and source-file editing used by the studio API and CLI."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .config import BarrelsConfig, load_config
from .discovery import find_configured_directories
from .errors import BarrelNotFoundError, SourceFileNotFoundError
from .kinds import GENERATED_FILE_NAMES, SOURCE_EXTENSIONS, BarrelKind
from .logging import get_logger
from .meta import META_EXPORT_NAME, extract_metadata
from .models import BarrelDirectory, BarrelInfo, BarrelResult, FileInfo
from .reconciler import Reconciler
from .scanner import expected_exports, pascal_case, source_file_names
from .syntax import SourceParser, find_exported_variable, get_parser

logger = get_logger("studio")

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_META_DECLARATION = re.compile(rf"\bexport\s+(?:const|let|var)\s+{META_EXPORT_NAME}\b")

_COMPONENT_EXTENSION = {BarrelKind.TS: ".tsx", BarrelKind.JS: ".jsx"}

_COMPONENT_TEMPLATE = """export const meta = {meta};

export default function {name}() {{
  return (
    <article>
      <h1>{{meta.title}}</h1>
    </article>
  );
}}
"""


def render_literal(value: Any, indent: int = 0) -> str:
    """Render a JSON-like Python value as JavaScript literal source."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_literal(item, indent) for item in value) + "]"
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        pad = "  " * (indent + 1)
        lines = [
            f"{pad}{_render_key(str(key))}: {render_literal(item, indent + 1)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(lines) + "\n" + "  " * indent + "}"
    raise TypeError(f"Cannot render {type(value).__name__} as a literal")


def _render_key(key: str) -> str:
    return key if _IDENTIFIER.match(key) else json.dumps(key, ensure_ascii=False)


def _meta_declaration(meta: Mapping[str, Any]) -> str:
    return f"export const {META_EXPORT_NAME} = {render_literal(dict(meta))};\n\n"


def _checked_name(file_name: str) -> str:
    name = file_name.strip()
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise ValueError(f"Invalid file name: {file_name!r}")
    return name


def update_file_meta(
    path: Union[str, Path],
    meta: Mapping[str, Any],
    parser: Optional[SourceParser] = None,
) -> None:
    """Replace the ``meta`` initializer of a source file, leaving the rest as is.

    A file without a ``meta`` export gets one prepended.
    """
    path = Path(path)
    parser = parser or get_parser()
    tree, source = parser.parse_file(path)
    declarator = find_exported_variable(tree, META_EXPORT_NAME, source)
    value = declarator.child_by_field_name("value") if declarator is not None else None
    literal = render_literal(dict(meta)).encode("utf-8")
    if value is None:
        updated = _meta_declaration(meta).encode("utf-8") + source
    else:
        updated = source[: value.start_byte] + literal + source[value.end_byte :]
    path.write_bytes(updated)


def create_file(
    directory: Union[str, Path],
    file_name: str,
    meta: Mapping[str, Any],
    kind: BarrelKind = BarrelKind.TS,
) -> Path:
    """Write a new component file embedding ``meta``; returns its path."""
    directory = Path(directory)
    name = _checked_name(file_name)
    if os.path.splitext(name)[1] not in SOURCE_EXTENSIONS:
        name += _COMPONENT_EXTENSION[kind]
    path = directory / name
    if path.exists():
        raise FileExistsError(f"File already exists: {path}")
    stem = os.path.splitext(name)[0]
    path.write_text(
        _COMPONENT_TEMPLATE.format(meta=render_literal(dict(meta)), name=pascal_case(stem)),
        encoding="utf-8",
    )
    return path


def delete_file(directory: Union[str, Path], file_name: str) -> bool:
    """Remove a source file; returns False when it was already gone."""
    path = Path(directory) / _checked_name(file_name)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def init_meta(
    directory: Union[str, Path], template: Mapping[str, Any]
) -> Tuple[List[str], List[str]]:
    """Prepend ``export const meta`` built from ``template`` to files lacking one.

    Returns ``(added, skipped)`` file names.
    """
    directory = Path(directory)
    added: List[str] = []
    skipped: List[str] = []
    declaration = _meta_declaration(template)
    for name in source_file_names(directory):
        path = directory / name
        content = path.read_text(encoding="utf-8")
        if _META_DECLARATION.search(content):
            skipped.append(name)
            continue
        path.write_text(declaration + content, encoding="utf-8")
        added.append(name)
    return added, skipped


def describe_barrel(
    base_dir: Path, found: BarrelDirectory, parser: Optional[SourceParser] = None
) -> BarrelInfo:
    files = [
        FileInfo(
            name=entry.file_name,
            path=found.dir / entry.file_name,
            meta=extract_metadata(found.dir / entry.file_name, parser) or {},
        )
        for entry in expected_exports(found.dir, found.kind)
    ]
    return BarrelInfo(
        dir=found.dir,
        relative_path=_relative(found.dir, base_dir),
        barrel_file=found.barrel_file,
        files=files,
    )


def _relative(path: Path, base: Path) -> str:
    try:
        return path.resolve().relative_to(base.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


class Studio:
    """Barrel operations rooted at one base directory.

    Every mutating call reconciles the owning barrel before returning.
    """

    def __init__(
        self,
        base_dir: Union[str, Path],
        config: Optional[BarrelsConfig] = None,
        reconciler: Optional[Reconciler] = None,
    ) -> None:
        self.base_dir = Path(base_dir).expanduser().resolve()
        if not self.base_dir.is_dir():
            raise FileNotFoundError(f"Directory not found: {self.base_dir}")
        self.config = config or load_config(self.base_dir)
        self.reconciler = reconciler or Reconciler()

    def _directories(self) -> List[BarrelDirectory]:
        return find_configured_directories(self.base_dir, self.config, self.reconciler.parser)

    def list_barrels(self) -> List[BarrelInfo]:
        return [
            describe_barrel(self.base_dir, found, self.reconciler.parser)
            for found in self._directories()
        ]

    def _find(self, relative_path: str) -> BarrelDirectory:
        for found in self._directories():
            if _relative(found.dir, self.base_dir) == relative_path:
                return found
        raise BarrelNotFoundError(relative_path)

    def get_barrel(self, relative_path: str) -> BarrelInfo:
        return describe_barrel(self.base_dir, self._find(relative_path), self.reconciler.parser)

    def _member(self, found: BarrelDirectory, file_name: str) -> Path:
        if file_name in GENERATED_FILE_NAMES:
            raise SourceFileNotFoundError(file_name)
        for entry in expected_exports(found.dir, found.kind):
            if entry.file_name == file_name:
                return found.dir / file_name
        raise SourceFileNotFoundError(file_name)

    def _reconcile(self, found: BarrelDirectory) -> BarrelResult:
        return self.reconciler.reconcile(found.dir, found.kind)

    def update_file(
        self, relative_path: str, file_name: str, meta: Mapping[str, Any]
    ) -> BarrelResult:
        found = self._find(relative_path)
        path = self._member(found, file_name)
        update_file_meta(path, meta, self.reconciler.parser)
        logger.info("Updated meta in %s", path)
        return self._reconcile(found)

    def create_file(
        self, relative_path: str, file_name: str, meta: Mapping[str, Any]
    ) -> Tuple[Path, BarrelResult]:
        found = self._find(relative_path)
        path = create_file(found.dir, file_name, meta, found.kind)
        logger.info("Created %s", path)
        return path, self._reconcile(found)

    def delete_file(self, relative_path: str, file_name: str) -> BarrelResult:
        found = self._find(relative_path)
        path = self._member(found, file_name)
        delete_file(found.dir, path.name)
        logger.info("Deleted %s", path)
        return self._reconcile(found)


def barrel_payload(info: BarrelInfo) -> Dict[str, Any]:
    """JSON-ready dictionary for a barrel summary."""
    return {
        "dir": str(info.dir),
        "relative_path": info.relative_path,
        "barrel_file": info.barrel_file,
        "files": [
            {"name": file.name, "path": str(file.path), "meta": file.meta}
            for file in info.files
        ],
    }


__all__ = [
    "Studio",
    "barrel_payload",
    "create_file",
    "delete_file",
    "describe_barrel",
    "init_meta",
    "render_literal",
    "update_file_meta",
]
