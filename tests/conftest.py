"""Shared fixtures for island map tests."""

import pytest

from py_island.config.config import MapConfig
from py_island.core.island_map import IslandMap


@pytest.fixture
def map_factory():
    """Build an IslandMap and run stages [first, last)."""

    def _make(first=0, last=None, **overrides):
        values = dict(size=200.0, num_points=300, island_seed=85882, map_seed=1)
        values.update(overrides)
        island = IslandMap(MapConfig(**values))
        island.generate(first, last)
        return island

    return _make


@pytest.fixture
def radial_map(map_factory):
    """Complete radial island."""
    return map_factory(size=300.0, num_points=500).graph


@pytest.fixture
def square_map(map_factory):
    """Complete map where everything inside the border is land."""
    return map_factory(island_shape="square").graph
