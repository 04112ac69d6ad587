"""Core data models shared across barrels components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .kinds import BarrelKind


@dataclass(frozen=True)
class ExportEntry:
    """One expected re-export derived from a source file name."""

    file: str
    meta_alias: str
    default_alias: str

    @property
    def file_name(self) -> str:
        return self.file[2:] if self.file.startswith("./") else self.file


@dataclass(frozen=True)
class BarrelDirectory:
    """A directory whose barrel is maintained, with its generated-file kind."""

    dir: Path
    kind: BarrelKind

    @property
    def barrel_file(self) -> str:
        return self.kind.file_name

    @property
    def output_path(self) -> Path:
        return self.dir / self.kind.file_name


@dataclass
class BarrelResult:
    """Outcome of reconciling one directory."""

    path: Path
    file_count: int
    written: bool = True


@dataclass
class MetaProperty:
    """One merged property of the generated ``Meta`` shape."""

    name: str
    type: str
    required: bool


@dataclass
class FileInfo:
    """A barrel member with its extracted metadata."""

    name: str
    path: Path
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BarrelInfo:
    """Summary of a barrel directory for listing and the studio API."""

    dir: Path
    relative_path: str
    barrel_file: str
    files: List[FileInfo] = field(default_factory=list)
