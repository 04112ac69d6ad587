"""Static extraction of ``meta`` objects and inference of the merged ``Meta`` shape."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from tree_sitter import Node

from .collation import locale_key
from .logging import get_logger
from .models import ExportEntry, MetaProperty
from .syntax import (
    UNREPRESENTABLE,
    SourceParser,
    array_elements,
    find_exported_variable,
    get_parser,
    is_object_literal,
    number_value,
    object_entries,
    string_value,
    unary_operand,
)

logger = get_logger("meta")

META_EXPORT_NAME = "meta"
META_TYPE_NAME = "Meta"


def _find_meta_object(path: Path, parser: SourceParser) -> Optional[tuple[Node, bytes]]:
    tree, source = parser.parse_file(path)
    if tree.root_node.has_error:
        logger.debug("Skipping %s: source does not parse cleanly", path)
        return None
    declarator = find_exported_variable(tree, META_EXPORT_NAME, source)
    if declarator is None:
        return None
    value = declarator.child_by_field_name("value")
    if not is_object_literal(value):
        return None
    return value, source


def extract_metadata(
    path: Union[str, Path], parser: Optional[SourceParser] = None
) -> Optional[Dict[str, Any]]:
    """Return the literal value of ``export const meta = {...}`` or ``None``.

    Keys whose values are not plain literals are omitted. Any read or parse
    problem yields ``None`` rather than an exception.
    """
    try:
        found = _find_meta_object(Path(path), parser or get_parser())
    except (OSError, ValueError) as exc:
        logger.debug("Could not read metadata from %s: %s", path, exc)
        return None
    if found is None:
        return None
    node, source = found
    return _object_value(node, source)


def has_metadata_export(path: Union[str, Path], parser: Optional[SourceParser] = None) -> bool:
    """Return True when the file exports a ``meta`` object literal."""
    try:
        return _find_meta_object(Path(path), parser or get_parser()) is not None
    except (OSError, ValueError):
        return False


def _object_value(node: Node, source: bytes) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value_node in object_entries(node, source):
        value = _literal_value(value_node, source)
        if value is UNREPRESENTABLE:
            result.pop(key, None)
            continue
        result[key] = value
    return result


def _literal_value(node: Node, source: bytes) -> Any:
    kind = node.type
    if kind == "string":
        return string_value(node, source)
    if kind == "number":
        return number_value(node, source)
    if kind == "true":
        return True
    if kind == "false":
        return False
    if kind == "null":
        return None
    if kind == "array":
        items: List[Any] = []
        for element in array_elements(node):
            value = UNREPRESENTABLE if element is None else _literal_value(element, source)
            items.append(None if value is UNREPRESENTABLE else value)
        return items
    if kind == "object":
        return _object_value(node, source)
    if kind == "unary_expression":
        operator, argument = unary_operand(node, source)
        if operator == "-" and argument is not None and argument.type == "number":
            number = number_value(argument, source)
            if number is not UNREPRESENTABLE:
                return -number
    return UNREPRESENTABLE


def infer_shape(value: Any) -> str:
    """Describe the structural type of a literal value as a TypeScript type."""
    if value is None:
        return "null"
    if value is UNREPRESENTABLE:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (list, tuple)):
        if not value:
            return "unknown[]"
        shapes = list(dict.fromkeys(infer_shape(item) for item in value))
        if len(shapes) == 1:
            return f"{shapes[0]}[]"
        return f"({' | '.join(shapes)})[]"
    if isinstance(value, Mapping):
        if not value:
            return "Record<string, unknown>"
        props = "; ".join(f"{key}: {infer_shape(item)}" for key, item in value.items())
        return f"{{ {props} }}"
    return "unknown"


def merge_properties(metadata: Sequence[Mapping[str, Any]]) -> List[MetaProperty]:
    """Merge per-file metadata into one property list.

    A property is required only when it appears in every supplied mapping;
    files without metadata should be passed as empty mappings so that they
    make every property optional.
    """
    if not metadata:
        return []

    shapes: Dict[str, Dict[str, None]] = {}
    counts: Dict[str, int] = {}
    for mapping in metadata:
        for key, value in mapping.items():
            shapes.setdefault(key, {})[infer_shape(value)] = None
            counts[key] = counts.get(key, 0) + 1

    properties = [
        MetaProperty(
            name=name,
            type=" | ".join(seen),
            required=counts[name] == len(metadata),
        )
        for name, seen in shapes.items()
    ]
    properties.sort(key=lambda prop: locale_key(prop.name))
    return properties


def render_meta_interface(properties: Sequence[MetaProperty]) -> str:
    """Render ``export interface Meta`` for TypeScript barrels."""
    if not properties:
        return f"export interface {META_TYPE_NAME} {{}}"
    lines = [f"  {prop.name}{'' if prop.required else '?'}: {prop.type};" for prop in properties]
    body = "\n".join(lines)
    return f"export interface {META_TYPE_NAME} {{\n{body}\n}}"


def render_meta_typedef(properties: Sequence[MetaProperty]) -> str:
    """Render the JSDoc ``@typedef`` equivalent of ``Meta`` for script barrels."""
    lines = ["/**", f" * @typedef {{Object}} {META_TYPE_NAME}"]
    for prop in properties:
        name = prop.name if prop.required else f"[{prop.name}]"
        lines.append(f" * @property {{{prop.type}}} {name}")
    lines.append(" */")
    return "\n".join(lines)


def render_collection(name: str, entries: Sequence[ExportEntry]) -> str:
    """Render the array pairing each entry's metadata with its component."""
    lines = [f"export const {name} = ["]
    for entry in entries:
        lines.append(f"  {{ meta: {entry.meta_alias}, Component: {entry.default_alias} }},")
    lines.append("];")
    return "\n".join(lines)


__all__ = [
    "META_EXPORT_NAME",
    "META_TYPE_NAME",
    "extract_metadata",
    "has_metadata_export",
    "infer_shape",
    "merge_properties",
    "render_collection",
    "render_meta_interface",
    "render_meta_typedef",
]
