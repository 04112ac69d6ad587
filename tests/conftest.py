from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.tree_builder import BarrelTreeBuilder


@pytest.fixture
def tree(tmp_path: Path) -> BarrelTreeBuilder:
    """Provide a reusable source tree builder rooted at the pytest tmp_path."""
    return BarrelTreeBuilder(tmp_path)
