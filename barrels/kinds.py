"""Generated-file conventions supported by barrels."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

PLACEHOLDER = "// Auto-generated barrel file\n"


class BarrelKind(Enum):
    """A generated-file naming convention and the sources it aggregates.

    ``TS`` barrels live in ``_index.ts`` and collect ``.ts``/``.tsx`` files;
    ``JS`` barrels live in ``_index.js`` and collect ``.js``/``.jsx`` files.
    """

    TS = "ts"
    JS = "js"

    @property
    def file_name(self) -> str:
        return f"_index.{self.value}"

    @property
    def source_extensions(self) -> Tuple[str, str]:
        if self is BarrelKind.TS:
            return (".ts", ".tsx")
        return (".js", ".jsx")

    @property
    def typed(self) -> bool:
        return self is BarrelKind.TS

    @classmethod
    def for_file_name(cls, name: str) -> Optional["BarrelKind"]:
        for kind in cls:
            if kind.file_name == name:
                return kind
        return None

    @classmethod
    def for_extension(cls, suffix: str) -> Optional["BarrelKind"]:
        for kind in cls:
            if suffix in kind.source_extensions:
                return kind
        return None

    @classmethod
    def parse(cls, value: str) -> "BarrelKind":
        """Return the kind named by ``value`` (``ts``/``js``, leading dot allowed)."""
        normalized = value.strip().lower().lstrip(".")
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(f"Unknown barrel kind: {value!r}")


GENERATED_FILE_NAMES = tuple(kind.file_name for kind in BarrelKind)
SOURCE_EXTENSIONS = tuple(ext for kind in BarrelKind for ext in kind.source_extensions)


__all__ = ["BarrelKind", "GENERATED_FILE_NAMES", "PLACEHOLDER", "SOURCE_EXTENSIONS"]
