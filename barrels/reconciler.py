"""Barrel reconciliation: keeps generated files in sync with their directories."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config import BarrelsConfig
from .discovery import (
    existing_barrel_kind,
    find_barrel_directories,
    find_configured_directories,
    infer_kind,
    majority_kind,
)
from .document import BarrelDocument
from .errors import BarrelParseError, NoBarrelFoundError
from .kinds import PLACEHOLDER, BarrelKind
from .logging import get_logger
from .meta import (
    extract_metadata,
    merge_properties,
    render_collection,
    render_meta_interface,
    render_meta_typedef,
)
from .models import BarrelResult, ExportEntry
from .scanner import collection_name_for, expected_exports, source_file_names
from .syntax import SourceParser, get_parser


class Reconciler:
    """Rewrites a directory's barrel to match the files beside it.

    Existing re-exports and unrelated declarations are kept as written;
    stale re-exports are dropped, missing ones appended, and the ``Meta``
    shape plus the aggregate array are regenerated on every run.
    """

    def __init__(
        self,
        parser: Optional[SourceParser] = None,
        *,
        auto_detect: bool = True,
    ) -> None:
        self.parser = parser or get_parser()
        self.auto_detect = auto_detect
        self.logger = get_logger("reconciler")

    def resolve_kind(
        self, directory: Union[str, Path], kind: Optional[BarrelKind] = None
    ) -> BarrelKind:
        """Pick the barrel kind: explicit override, then file on disk, then convention."""
        directory = Path(directory)
        if kind is not None:
            return kind
        existing = existing_barrel_kind(directory)
        if existing is not None:
            return existing
        if not self.auto_detect:
            raise NoBarrelFoundError(directory)
        inferred = infer_kind(directory, self.parser)
        if inferred is not None:
            return inferred
        return majority_kind(source_file_names(directory))

    def reconcile(
        self,
        directory: Union[str, Path],
        kind: Optional[BarrelKind] = None,
        *,
        skip_empty: bool = False,
    ) -> BarrelResult:
        """Reconcile one directory and write its barrel.

        With ``skip_empty``, a directory with no eligible files and no
        barrel on disk is left untouched and the result is marked unwritten.
        """
        directory = Path(directory).resolve()
        if not directory.is_dir():
            raise FileNotFoundError(f"Directory not found: {directory}")

        kind = self.resolve_kind(directory, kind)
        expected = expected_exports(directory, kind)
        output_path = directory / kind.file_name

        if not expected and skip_empty and not output_path.exists():
            self.logger.debug("No eligible files in %s; skipping", directory)
            return BarrelResult(path=output_path, file_count=0, written=False)

        text = self.render(directory, kind, expected)
        output_path.write_text(text, encoding="utf-8")
        self.logger.debug("Wrote %s (%d files)", output_path, len(expected))
        return BarrelResult(path=output_path, file_count=len(expected))

    def render(
        self,
        directory: Path,
        kind: BarrelKind,
        expected: Optional[Sequence[ExportEntry]] = None,
    ) -> str:
        """Compute the new barrel text without writing it."""
        directory = Path(directory).resolve()
        if expected is None:
            expected = expected_exports(directory, kind)
        collection_name = collection_name_for(directory.name)

        document = self._load_document(directory / kind.file_name, kind, collection_name)
        dropped = document.prune({entry.file for entry in expected})
        if dropped:
            self.logger.debug("Removing stale exports from %s: %s", directory, ", ".join(dropped))
        document.drop_generated()

        existing_sources = document.sources()
        for entry in expected:
            if entry.file not in existing_sources:
                document.add_reexport(entry)
        document.sort_exports()

        sections = []
        body = document.render()
        if body:
            sections.append(body)
        if expected:
            properties = merge_properties(self.collect_metadata(directory, expected))
            if kind.typed:
                sections.append(render_meta_interface(properties))
            else:
                sections.append(render_meta_typedef(properties))
            sections.append(render_collection(collection_name, expected))
        return "\n\n".join(sections) + "\n"

    def collect_metadata(
        self, directory: Path, expected: Sequence[ExportEntry]
    ) -> List[Dict[str, Any]]:
        """Extract each entry's metadata; files without any contribute an empty mapping."""
        metadata: List[Dict[str, Any]] = []
        for entry in expected:
            extracted = extract_metadata(directory / entry.file_name, self.parser)
            if extracted is None:
                self.logger.debug("No meta export in %s", directory / entry.file_name)
                extracted = {}
            metadata.append(extracted)
        return metadata

    def _load_document(
        self, path: Path, kind: BarrelKind, collection_name: str
    ) -> BarrelDocument:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            content = PLACEHOLDER
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Could not read %s, starting over: %s", path, exc)
            return BarrelDocument.placeholder()

        try:
            return BarrelDocument.parse(
                content,
                grammar=self.parser.grammar_for(kind.file_name),
                collection_name=collection_name,
                parser=self.parser,
            )
        except BarrelParseError:
            self.logger.warning("%s does not parse; regenerating from scratch", path)
            return BarrelDocument.placeholder()


def reconcile(
    directory: Union[str, Path],
    kind: Optional[BarrelKind] = None,
    *,
    auto_detect: bool = True,
) -> BarrelResult:
    """Reconcile a single directory with a default ``Reconciler``."""
    return Reconciler(auto_detect=auto_detect).reconcile(directory, kind)


def init_barrel(
    directory: Union[str, Path], kind: BarrelKind = BarrelKind.TS
) -> Tuple[bool, Path]:
    """Create a placeholder barrel unless one of either kind already exists.

    Returns ``(created, path)``.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Directory not found: {directory}")
    existing = existing_barrel_kind(directory)
    if existing is not None:
        return False, directory / existing.file_name
    output_path = directory / kind.file_name
    output_path.write_text(PLACEHOLDER, encoding="utf-8")
    return True, output_path


def update_barrels(
    base_dir: Union[str, Path],
    config: Optional[BarrelsConfig] = None,
    reconciler: Optional[Reconciler] = None,
) -> List[BarrelResult]:
    """Discover every barrel under ``base_dir`` and reconcile each in turn."""
    base = Path(base_dir)
    if not base.is_dir():
        raise FileNotFoundError(f"Directory not found: {base}")
    reconciler = reconciler or Reconciler()
    if config is not None:
        directories = find_configured_directories(base, config, reconciler.parser)
    else:
        directories = find_barrel_directories(base, parser=reconciler.parser)
    return [reconciler.reconcile(found.dir, found.kind) for found in directories]


__all__ = ["Reconciler", "init_barrel", "reconcile", "update_barrels"]
