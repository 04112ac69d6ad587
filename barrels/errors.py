"""Exception types raised by barrels operations."""

from __future__ import annotations

from pathlib import Path


class BarrelError(RuntimeError):
    """Base class for barrel maintenance failures."""


class NoBarrelFoundError(BarrelError):
    """Raised when a generated file is required but none exists in the directory."""

    def __init__(self, directory: Path) -> None:
        super().__init__(f"No barrel file found in {directory}")
        self.directory = directory


class BarrelParseError(BarrelError, ValueError):
    """Raised when an existing generated file does not parse cleanly."""


class BarrelNotFoundError(BarrelError, LookupError):
    """Raised when a barrel lookup by relative path has no match."""

    def __init__(self, relative_path: str) -> None:
        super().__init__(f"Barrel not found: {relative_path}")
        self.relative_path = relative_path


class SourceFileNotFoundError(BarrelError, LookupError):
    """Raised when a file is not part of the barrel it was looked up in."""

    def __init__(self, file_name: str) -> None:
        super().__init__(f"File not found: {file_name}")
        self.file_name = file_name


__all__ = [
    "BarrelError",
    "BarrelNotFoundError",
    "BarrelParseError",
    "NoBarrelFoundError",
    "SourceFileNotFoundError",
]
