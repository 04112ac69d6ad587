"""Directory scanning that yields the expected re-exports of a barrel."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Union

from .kinds import BarrelKind, GENERATED_FILE_NAMES, SOURCE_EXTENSIONS
from .models import ExportEntry


def pascal_case(name: str) -> str:
    """Upper-case the first character, leaving the rest untouched (``home`` → ``Home``)."""
    return name[:1].upper() + name[1:]


def export_entry_for(file_name: str) -> ExportEntry:
    """Derive the re-export aliases for one source file name."""
    stem, _ = os.path.splitext(file_name)
    return ExportEntry(
        file=f"./{file_name}",
        meta_alias=f"{stem}Meta",
        default_alias=pascal_case(stem),
    )


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char in "_$"


def collection_name_for(directory_name: str) -> str:
    """Derive the collection constant's name from a directory name.

    Names that are already identifiers are kept. Otherwise separators are
    dropped and the following words capitalised (``blog-posts`` → ``blogPosts``);
    a leading digit gets a ``_`` prefix.
    """
    words: List[str] = []
    current = ""
    for char in directory_name:
        if _is_identifier_char(char):
            current += char
        elif current:
            words.append(current)
            current = ""
    if current:
        words.append(current)
    if not words:
        return "_"
    name = words[0] + "".join(pascal_case(word) for word in words[1:])
    if name[0].isdigit():
        name = "_" + name
    return name


def _iter_file_names(directory: Path) -> Iterator[str]:
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            if not is_dir:
                yield entry.name


def expected_exports(directory: Union[str, Path], kind: BarrelKind) -> List[ExportEntry]:
    """Return one entry per eligible source file, sorted by file name.

    Only files carrying one of ``kind``'s extensions are eligible, and the
    generated file itself is excluded. Sorting is case-sensitive.
    """
    directory = Path(directory)
    accepted = kind.source_extensions
    names = [
        name
        for name in _iter_file_names(directory)
        if os.path.splitext(name)[1] in accepted and name != kind.file_name
    ]
    return [export_entry_for(name) for name in sorted(names)]


def source_file_names(directory: Union[str, Path]) -> List[str]:
    """Return every file in ``directory`` with any supported source extension."""
    return sorted(
        name
        for name in _iter_file_names(Path(directory))
        if os.path.splitext(name)[1] in SOURCE_EXTENSIONS and name not in GENERATED_FILE_NAMES
    )


__all__ = [
    "collection_name_for",
    "expected_exports",
    "export_entry_for",
    "pascal_case",
    "source_file_names",
]
