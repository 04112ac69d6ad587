"""Configuration loading for barrels (.barrels.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .kinds import BarrelKind

CONFIG_FILE_NAME = ".barrels.yml"

DEFAULT_DEBOUNCE_MS = 100
DEFAULT_POLL_INTERVAL = 0.25
DEFAULT_STUDIO_HOST = "127.0.0.1"
DEFAULT_STUDIO_PORT = 3456

# Always skipped by discovery, regardless of configuration.
ALWAYS_EXCLUDED_DIRS = ("node_modules",)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class WatchConfig:
    """Change-notification settings."""

    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    poll_interval: float = DEFAULT_POLL_INTERVAL


@dataclass
class StudioConfig:
    """Studio server bind settings."""

    host: str = DEFAULT_STUDIO_HOST
    port: int = DEFAULT_STUDIO_PORT


@dataclass
class BarrelsConfig:
    """Represents the settings defined in .barrels.yml."""

    root: Path
    exclude_dirs: List[str] = field(default_factory=list)
    discover_by_convention: bool = True
    default_kind: BarrelKind = BarrelKind.TS
    watch: WatchConfig = field(default_factory=WatchConfig)
    studio: StudioConfig = field(default_factory=StudioConfig)

    @property
    def excluded_dir_names(self) -> frozenset[str]:
        return frozenset(ALWAYS_EXCLUDED_DIRS) | frozenset(self.exclude_dirs)


def load_config(config_path: Path) -> BarrelsConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BarrelsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    config = BarrelsConfig(root=root)
    config.exclude_dirs = _as_str_list(data.get("exclude_dirs"))

    discover = _as_bool(data.get("discover_by_convention"))
    if discover is not None:
        config.discover_by_convention = discover

    kind_name = _as_str(data.get("default_kind"))
    if kind_name:
        try:
            config.default_kind = BarrelKind.parse(kind_name)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    watch_data = _as_dict(data.get("watch"))
    if watch_data:
        debounce = _as_int(watch_data.get("debounce_ms"))
        if debounce is not None and debounce >= 0:
            config.watch.debounce_ms = debounce
        poll_interval = _as_float(watch_data.get("poll_interval"))
        if poll_interval is not None and poll_interval > 0:
            config.watch.poll_interval = poll_interval

    studio_data = _as_dict(data.get("studio"))
    if studio_data:
        host = _as_str(studio_data.get("host"))
        if host:
            config.studio.host = host
        port = _as_int(studio_data.get("port"))
        if port is not None and 0 < port < 65536:
            config.studio.port = port

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    if config_path.name != CONFIG_FILE_NAME:
        return (config_path.parent / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BarrelsConfig",
    "CONFIG_FILE_NAME",
    "ConfigError",
    "StudioConfig",
    "WatchConfig",
    "load_config",
]
