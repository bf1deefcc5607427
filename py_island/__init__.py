"""Procedural island map generator."""

from .config import MapConfig, Settings, settings
from .core.island_map import IslandMap, generate_island

__version__ = "0.1.0"

__all__ = ['IslandMap', 'MapConfig', 'Settings', 'generate_island', 'settings']
