"""Configuration management."""

from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.island_shape import IslandShapeType


class MapConfig(BaseModel):
    """Parameters of one map generation run."""

    size: float = Field(default=600.0, gt=20, description="Map side length")
    num_points: int = Field(default=2000, ge=4, description="Number of polygons")
    lake_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0,
        description="Fraction of water corners that makes a polygon water",
    )
    num_lloyd_iterations: int = Field(default=2, ge=0, description="Lloyd relaxation rounds")
    improve_corners: bool = Field(
        default=True, description="Move corners to the average of their polygons"
    )
    island_shape: IslandShapeType = Field(
        default=IslandShapeType.RADIAL, description="Island shape variant"
    )
    island_seed: int = Field(
        default=85882, ge=1, lt=2147483647, description="Seed for the island shape"
    )
    map_seed: int = Field(
        default=1, ge=1, lt=2147483647, description="Seed for points and rivers"
    )
    elevation_scale_factor: float = Field(
        default=1.1, gt=0.0, description="Mountain area factor for redistribution"
    )
    watershed_iterations: int = Field(
        default=100, ge=1, description="Cap on watershed pointer-chasing rounds"
    )


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PY_ISLAND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    # Map Generation Configuration
    default_map_size: float = Field(default=600.0, description="Default map side length")
    default_num_points: int = Field(default=2000, description="Default number of polygons")
    default_island_shape: IslandShapeType = Field(
        default=IslandShapeType.RADIAL, description="Default island shape"
    )

    def map_config(self, **overrides: Any) -> MapConfig:
        """Build a MapConfig from the defaults, with explicit overrides."""
        values = {
            "size": self.default_map_size,
            "num_points": self.default_num_points,
            "island_shape": self.default_island_shape,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return MapConfig(**values)


# Instantiate singleton settings object
settings = Settings()
