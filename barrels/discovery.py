"""Discovery of directories whose barrels should be maintained."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Collection, Iterable, List, Optional, Union

from .config import ALWAYS_EXCLUDED_DIRS, BarrelsConfig
from .kinds import BarrelKind
from .logging import get_logger
from .meta import has_metadata_export
from .models import BarrelDirectory
from .scanner import source_file_names
from .syntax import SourceParser, get_parser

logger = get_logger("discovery")


def existing_barrel_kind(directory: Union[str, Path]) -> Optional[BarrelKind]:
    """Return the kind of the generated file present in ``directory``, ``_index.ts`` first."""
    directory = Path(directory)
    for kind in BarrelKind:
        if (directory / kind.file_name).is_file():
            return kind
    return None


def majority_kind(file_names: Iterable[str]) -> BarrelKind:
    """Pick the kind whose extensions most of ``file_names`` carry; ties favour TypeScript."""
    counts: Counter[BarrelKind] = Counter()
    for name in file_names:
        kind = BarrelKind.for_extension(os.path.splitext(name)[1])
        if kind is not None:
            counts[kind] += 1
    if counts[BarrelKind.JS] > counts[BarrelKind.TS]:
        return BarrelKind.JS
    return BarrelKind.TS


def infer_kind(
    directory: Union[str, Path], parser: Optional[SourceParser] = None
) -> Optional[BarrelKind]:
    """Infer a barrel kind for a directory without a generated file.

    Returns ``None`` unless at least one source file exports ``meta``.
    """
    directory = Path(directory)
    parser = parser or get_parser()
    names = source_file_names(directory)
    if not any(has_metadata_export(directory / name, parser) for name in names):
        return None
    return majority_kind(names)


def find_barrel_directories(
    base_dir: Union[str, Path],
    *,
    excluded_dirs: Collection[str] = ALWAYS_EXCLUDED_DIRS,
    by_convention: bool = True,
    parser: Optional[SourceParser] = None,
) -> List[BarrelDirectory]:
    """Walk ``base_dir`` pre-order and return every barrel directory found.

    A directory qualifies when it holds a generated file, or, with
    ``by_convention``, when one of its source files exports ``meta``.
    A missing ``base_dir`` yields an empty list.
    """
    base = Path(base_dir)
    parser = parser or get_parser()
    excluded = set(excluded_dirs) | set(ALWAYS_EXCLUDED_DIRS)
    found: List[BarrelDirectory] = []

    def scan(directory: Path) -> None:
        if not directory.is_dir():
            return
        try:
            with os.scandir(directory) as entries:
                subdirs = sorted(
                    entry.name
                    for entry in entries
                    if entry.is_dir(follow_symlinks=False) and entry.name not in excluded
                )
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", directory, exc)
            return

        kind = existing_barrel_kind(directory)
        if kind is None and by_convention:
            kind = infer_kind(directory, parser)
            if kind is not None:
                logger.debug("Discovered %s by meta convention (%s)", directory, kind.file_name)
        if kind is not None:
            found.append(BarrelDirectory(dir=directory, kind=kind))

        for name in subdirs:
            scan(directory / name)

    scan(base)
    return found


def find_configured_directories(
    base_dir: Union[str, Path],
    config: BarrelsConfig,
    parser: Optional[SourceParser] = None,
) -> List[BarrelDirectory]:
    """``find_barrel_directories`` with exclusions and discovery mode taken from ``config``."""
    return find_barrel_directories(
        base_dir,
        excluded_dirs=config.excluded_dir_names,
        by_convention=config.discover_by_convention,
        parser=parser,
    )


__all__ = [
    "existing_barrel_kind",
    "find_barrel_directories",
    "find_configured_directories",
    "infer_kind",
    "majority_kind",
]
