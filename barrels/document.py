"""Editable model of a generated barrel file.

A document is the ordered list of a barrel's top-level declarations. Each
declaration keeps its original source text, so anything the reconciler
does not touch is written back byte-for-byte. Only re-exports added for new
files and the two generated sections are produced from scratch.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Set

from tree_sitter import Node

from .collation import locale_key
from .errors import BarrelParseError
from .kinds import PLACEHOLDER
from .meta import META_TYPE_NAME
from .models import ExportEntry
from .syntax import (
    SourceParser,
    declares_variable_named,
    export_source,
    get_parser,
    is_comment,
    is_named_export,
    is_type_declaration_named,
    node_text,
    top_level_nodes,
)

_TYPEDEF_MARKER = f"@typedef {{Object}} {META_TYPE_NAME}"


class DeclarationKind(Enum):
    OTHER = "other"
    EXPORT = "export"
    SHAPE = "shape"
    COLLECTION = "collection"


@dataclass
class Declaration:
    """One top-level statement or comment of a barrel."""

    kind: DeclarationKind
    text: str
    source: Optional[str] = None

    @property
    def is_generated(self) -> bool:
        return self.kind in (DeclarationKind.SHAPE, DeclarationKind.COLLECTION)


def reexport_text(entry: ExportEntry) -> str:
    module = json.dumps(entry.file, ensure_ascii=False)
    return f"export {{meta as {entry.meta_alias}, default as {entry.default_alias}}} from {module};"


class BarrelDocument:
    """Mutable sequence of barrel declarations with reconciliation helpers."""

    def __init__(self, declarations: Iterable[Declaration] = ()) -> None:
        self.declarations: List[Declaration] = list(declarations)

    @classmethod
    def placeholder(cls) -> "BarrelDocument":
        return cls([Declaration(DeclarationKind.OTHER, PLACEHOLDER.rstrip("\n"))])

    @classmethod
    def parse(
        cls,
        text: str,
        *,
        grammar: str,
        collection_name: str,
        parser: Optional[SourceParser] = None,
    ) -> "BarrelDocument":
        """Split barrel source into classified declarations.

        Raises ``BarrelParseError`` when the source contains syntax errors.
        """
        source = text.encode("utf-8")
        tree = (parser or get_parser()).parse(source, grammar)
        if tree.root_node.has_error:
            raise BarrelParseError("barrel source contains syntax errors")

        declarations: List[Declaration] = []
        previous: Optional[Node] = None
        for node in top_level_nodes(tree):
            node_source = node_text(node, source)
            if (
                is_comment(node)
                and previous is not None
                and declarations
                and declarations[-1].kind is DeclarationKind.EXPORT
                and node.start_point[0] == previous.end_point[0]
            ):
                # A comment on the same line stays with the re-export it annotates.
                trailing = source[previous.end_byte : node.end_byte]
                declarations[-1].text += trailing.decode("utf-8", errors="replace")
                previous = node
                continue
            previous = node
            if is_comment(node):
                kind = DeclarationKind.SHAPE if _TYPEDEF_MARKER in node_source else DeclarationKind.OTHER
                declarations.append(Declaration(kind, node_source))
            elif is_type_declaration_named(node, META_TYPE_NAME, source):
                declarations.append(Declaration(DeclarationKind.SHAPE, node_source))
            elif declares_variable_named(node, collection_name, source):
                declarations.append(Declaration(DeclarationKind.COLLECTION, node_source))
            elif is_named_export(node):
                declarations.append(
                    Declaration(DeclarationKind.EXPORT, node_source, export_source(node, source))
                )
            else:
                declarations.append(Declaration(DeclarationKind.OTHER, node_source))
        return cls(declarations)

    def sources(self) -> Set[str]:
        """Module sources referenced by re-export declarations."""
        return {
            decl.source
            for decl in self.declarations
            if decl.kind is DeclarationKind.EXPORT and decl.source is not None
        }

    def prune(self, expected_sources: Set[str]) -> List[str]:
        """Drop re-exports of modules not in ``expected_sources``; return the dropped sources."""
        kept: List[Declaration] = []
        dropped: List[str] = []
        for decl in self.declarations:
            if (
                decl.kind is DeclarationKind.EXPORT
                and decl.source is not None
                and decl.source not in expected_sources
            ):
                dropped.append(decl.source)
                continue
            kept.append(decl)
        self.declarations = kept
        return dropped

    def drop_generated(self) -> None:
        self.declarations = [decl for decl in self.declarations if not decl.is_generated]

    def add_reexport(self, entry: ExportEntry) -> None:
        self.declarations.append(
            Declaration(DeclarationKind.EXPORT, reexport_text(entry), entry.file)
        )

    def sort_exports(self) -> None:
        """Move every export after the other declarations, ordered by module source."""
        others = [decl for decl in self.declarations if decl.kind is not DeclarationKind.EXPORT]
        exports = [decl for decl in self.declarations if decl.kind is DeclarationKind.EXPORT]
        exports.sort(key=lambda decl: locale_key(decl.source or ""))
        self.declarations = others + exports

    def render(self) -> str:
        return "\n".join(decl.text for decl in self.declarations)


__all__ = ["BarrelDocument", "Declaration", "DeclarationKind", "reexport_text"]
