"""Tests for barrels.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from barrels.config import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_STUDIO_PORT,
    BarrelsConfig,
    ConfigError,
    load_config,
)
from barrels.kinds import BarrelKind


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, BarrelsConfig)
    assert config.root == tmp_path.resolve()
    assert config.exclude_dirs == []
    assert config.discover_by_convention is True
    assert config.default_kind is BarrelKind.TS
    assert config.watch.debounce_ms == DEFAULT_DEBOUNCE_MS
    assert config.studio.port == DEFAULT_STUDIO_PORT
    assert config.excluded_dir_names == frozenset({"node_modules"})


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".barrels.yml").write_text(
        """
exclude_dirs:
  - dist
  - .cache
discover_by_convention: no
default_kind: js
watch:
  debounce_ms: 250
  poll_interval: 0.5
studio:
  host: 0.0.0.0
  port: 4000
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.exclude_dirs == ["dist", ".cache"]
    assert config.discover_by_convention is False
    assert config.default_kind is BarrelKind.JS
    assert config.watch.debounce_ms == 250
    assert config.watch.poll_interval == 0.5
    assert config.studio.host == "0.0.0.0"
    assert config.studio.port == 4000
    assert config.excluded_dir_names == frozenset({"node_modules", "dist", ".cache"})


def test_load_config_ignores_invalid_values(tmp_path: Path) -> None:
    (tmp_path / ".barrels.yml").write_text(
        "watch:\n  debounce_ms: -5\n  poll_interval: soon\nstudio:\n  port: 70000\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path / ".barrels.yml")

    assert config.watch.debounce_ms == DEFAULT_DEBOUNCE_MS
    assert config.studio.port == DEFAULT_STUDIO_PORT


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".barrels.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).exclude_dirs == []


@pytest.mark.parametrize(
    "content",
    ["- just\n- a list\n", "default_kind: cobol\n", "exclude_dirs: [unclosed\n"],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, content: str) -> None:
    (tmp_path / ".barrels.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
