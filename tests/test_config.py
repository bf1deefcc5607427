"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from py_island.config.config import MapConfig, Settings
from py_island.core.island_shape import IslandShapeType


class TestMapConfig:
    """Test map generation parameters."""

    def test_defaults(self):
        config = MapConfig()
        assert config.size == 600.0
        assert config.num_points == 2000
        assert config.lake_threshold == 0.3
        assert config.num_lloyd_iterations == 2
        assert config.improve_corners is True
        assert config.island_shape == IslandShapeType.RADIAL
        assert config.island_seed == 85882
        assert config.map_seed == 1
        assert config.elevation_scale_factor == 1.1
        assert config.watershed_iterations == 100

    def test_shape_from_string(self):
        assert MapConfig(island_shape="perlin").island_shape == IslandShapeType.PERLIN

    @pytest.mark.parametrize("field,value", [
        ("num_points", 3),
        ("size", 0.0),
        ("lake_threshold", 1.5),
        ("num_lloyd_iterations", -1),
        ("island_seed", 0),
        ("map_seed", 2147483647),
        ("island_shape", "volcano"),
        ("watershed_iterations", 0),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            MapConfig(**{field: value})


class TestSettings:
    """Test environment driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PY_ISLAND_LOG_LEVEL", raising=False)
        s = Settings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"
        assert s.default_island_shape == IslandShapeType.RADIAL

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("PY_ISLAND_DEFAULT_MAP_SIZE", "300")
        monkeypatch.setenv("PY_ISLAND_DEFAULT_ISLAND_SHAPE", "blob")
        monkeypatch.setenv("PY_ISLAND_LOG_FORMAT", "json")
        s = Settings()
        assert s.default_map_size == 300.0
        assert s.default_island_shape == IslandShapeType.BLOB
        assert s.log_format == "json"

    def test_map_config_overrides(self):
        s = Settings(default_map_size=400.0, default_num_points=800)
        config = s.map_config(num_points=100, map_seed=None, island_seed=7)
        assert config.size == 400.0
        assert config.num_points == 100
        assert config.map_seed == 1
        assert config.island_seed == 7

    def test_map_config_validates(self):
        with pytest.raises(ValidationError):
            Settings().map_config(num_points=2)
