"""Tree-sitter parsing and node accessors for TypeScript/JavaScript sources.

Everything that knows about concrete tree-sitter node types lives here. The
reconciler and metadata extractor only use the predicates and accessors
below, so grammar differences between the TypeScript and TSX parsers stay
in one place.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree


TYPESCRIPT = "typescript"
TSX = "tsx"

_GRAMMARS = {
    TYPESCRIPT: tree_sitter_typescript.language_typescript,
    TSX: tree_sitter_typescript.language_tsx,
}

# The TSX grammar is a superset of JavaScript with JSX, so plain scripts use it too.
_GRAMMAR_BY_SUFFIX = {
    ".ts": TYPESCRIPT,
    ".mts": TYPESCRIPT,
    ".cts": TYPESCRIPT,
    ".tsx": TSX,
    ".js": TSX,
    ".jsx": TSX,
    ".mjs": TSX,
    ".cjs": TSX,
}

_VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}
_TYPE_DECLARATIONS = {"interface_declaration", "type_alias_declaration"}


class _Unrepresentable:
    """Marker for expressions that are not plain literals."""

    _instance: Optional["_Unrepresentable"] = None

    def __new__(cls) -> "_Unrepresentable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNREPRESENTABLE"

    def __bool__(self) -> bool:
        return False


UNREPRESENTABLE = _Unrepresentable()


class SourceParser:
    """Lazily builds one tree-sitter parser per grammar."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    @staticmethod
    def grammar_for(path: Union[str, Path]) -> str:
        return _GRAMMAR_BY_SUFFIX.get(Path(path).suffix.lower(), TSX)

    def _get_parser(self, grammar: str) -> Parser:
        parser = self._parsers.get(grammar)
        if parser is None:
            parser = Parser(Language(_GRAMMARS[grammar]()))
            self._parsers[grammar] = parser
        return parser

    def parse(self, source: bytes, grammar: str) -> Tree:
        return self._get_parser(grammar).parse(source)

    def parse_file(self, path: Union[str, Path]) -> tuple[Tree, bytes]:
        """Parse a file from disk. Raises ``OSError`` when it cannot be read."""
        source = Path(path).read_bytes()
        return self.parse(source, self.grammar_for(path)), source


_default_parser: Optional[SourceParser] = None


def get_parser() -> SourceParser:
    """Return the shared parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = SourceParser()
    return _default_parser


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def top_level_nodes(tree: Tree) -> List[Node]:
    return list(tree.root_node.children)


# -- statement predicates -------------------------------------------------


def is_export_statement(node: Node) -> bool:
    return node.type == "export_statement"


def is_named_export(node: Node) -> bool:
    """True for ``export {...}``/``export const`` forms; false for default and star exports."""
    if not is_export_statement(node):
        return False
    for child in node.children:
        if child.type in {"default", "*", "namespace_export", "="}:
            return False
    return True


def export_source(node: Node, source: bytes) -> Optional[str]:
    """Return the module string of ``export ... from "x"``, if any."""
    if not is_export_statement(node):
        return None
    source_node = node.child_by_field_name("source")
    if source_node is None or source_node.type != "string":
        return None
    value = string_value(source_node, source)
    return value if isinstance(value, str) else None


def exported_declaration(node: Node) -> Optional[Node]:
    if not is_export_statement(node):
        return None
    return node.child_by_field_name("declaration")


def _unwrap_export(node: Node) -> Node:
    declaration = exported_declaration(node)
    return declaration if declaration is not None else node


def is_type_declaration_named(node: Node, name: str, source: bytes) -> bool:
    """Match ``[export] interface <name>`` or ``[export] type <name> = ...``."""
    target = _unwrap_export(node)
    if target.type not in _TYPE_DECLARATIONS:
        return False
    name_node = target.child_by_field_name("name")
    return name_node is not None and node_text(name_node, source) == name


def variable_declarators(node: Node) -> Iterator[Node]:
    """Yield declarators of ``[export] const/let/var`` statements."""
    target = _unwrap_export(node)
    if target.type not in _VARIABLE_DECLARATIONS:
        return
    for child in target.named_children:
        if child.type == "variable_declarator":
            yield child


def declarator_name(declarator: Node, source: bytes) -> Optional[str]:
    name_node = declarator.child_by_field_name("name")
    if name_node is None or name_node.type != "identifier":
        return None
    return node_text(name_node, source)


def declares_variable_named(node: Node, name: str, source: bytes) -> bool:
    return any(declarator_name(decl, source) == name for decl in variable_declarators(node))


def is_comment(node: Node) -> bool:
    return node.type == "comment"


def find_exported_variable(tree: Tree, name: str, source: bytes) -> Optional[Node]:
    """Return the declarator of a top-level ``export const <name> = ...``."""
    for node in top_level_nodes(tree):
        if exported_declaration(node) is None:
            continue
        for declarator in variable_declarators(node):
            if declarator_name(declarator, source) == name:
                return declarator
    return None


# -- literal accessors ----------------------------------------------------


def is_object_literal(node: Optional[Node]) -> bool:
    return node is not None and node.type == "object"


def object_entries(node: Node, source: bytes) -> Iterator[tuple[str, Node]]:
    """Yield ``(key, value_node)`` for plain ``key: value`` pairs in source order."""
    for child in node.named_children:
        if child.type != "pair":
            continue
        key_node = child.child_by_field_name("key")
        value_node = child.child_by_field_name("value")
        if key_node is None or value_node is None:
            continue
        key = property_key(key_node, source)
        if key is not None:
            yield key, value_node


def property_key(node: Node, source: bytes) -> Optional[str]:
    if node.type == "property_identifier":
        return node_text(node, source)
    if node.type == "string":
        value = string_value(node, source)
        return value if isinstance(value, str) else None
    if node.type == "number":
        value = number_value(node, source)
        if value is UNREPRESENTABLE:
            return None
        return _format_number_key(value)
    return None


def _format_number_key(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def array_elements(node: Node) -> List[Optional[Node]]:
    """Return array elements in order, with ``None`` for holes like ``[1, , 2]``."""
    elements: List[Optional[Node]] = []
    expecting_value = True
    for child in node.children:
        if child.type == "[":
            continue
        if child.type == "]":
            break
        if child.type == ",":
            if expecting_value:
                elements.append(None)
            expecting_value = True
            continue
        if child.type == "comment":
            continue
        elements.append(child)
        expecting_value = False
    return elements


_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def _decode_escape(escape: str) -> str:
    body = escape[1:]
    if not body:
        return ""
    if body[0] in "\r\n\u2028\u2029":
        return ""
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith("x") and len(body) == 3:
        return chr(int(body[1:], 16))
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body.startswith("u") and len(body) == 5:
        return chr(int(body[1:], 16))
    return body


def string_value(node: Node, source: bytes) -> Union[str, _Unrepresentable]:
    if node.type != "string":
        return UNREPRESENTABLE
    parts: List[str] = []
    for child in node.children:
        if child.type == "string_fragment":
            parts.append(node_text(child, source))
        elif child.type == "escape_sequence":
            try:
                parts.append(_decode_escape(node_text(child, source)))
            except ValueError:
                return UNREPRESENTABLE
        elif child.type == "html_character_reference":
            parts.append(node_text(child, source))
    return "".join(parts)


_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}
_LEGACY_OCTAL = re.compile(r"^0[0-7]+$")


def number_value(node: Node, source: bytes) -> Union[int, float, _Unrepresentable]:
    text = node_text(node, source).replace("_", "")
    lowered = text.lower()
    if lowered.endswith("n"):
        # BigInt literals have no JSON-compatible value.
        return UNREPRESENTABLE
    try:
        base = _RADIX_PREFIXES.get(lowered[:2])
        if base is not None:
            return int(lowered[2:], base)
        if _LEGACY_OCTAL.match(lowered):
            return int(lowered, 8)
        if any(marker in lowered for marker in (".", "e")):
            return float(lowered)
        return int(lowered)
    except ValueError:
        return UNREPRESENTABLE


def unary_operand(node: Node, source: bytes) -> tuple[Optional[str], Optional[Node]]:
    if node.type != "unary_expression":
        return None, None
    operator = node.child_by_field_name("operator")
    argument = node.child_by_field_name("argument")
    return (node_text(operator, source) if operator is not None else None), argument


__all__ = [
    "SourceParser",
    "TSX",
    "TYPESCRIPT",
    "UNREPRESENTABLE",
    "array_elements",
    "declares_variable_named",
    "export_source",
    "find_exported_variable",
    "get_parser",
    "is_comment",
    "is_named_export",
    "is_object_literal",
    "is_type_declaration_named",
    "node_text",
    "number_value",
    "object_entries",
    "string_value",
    "top_level_nodes",
    "unary_operand",
]
