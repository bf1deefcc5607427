"""
Configuration for map generation.
"""

from .config import MapConfig, Settings, settings
from .logging import configure_logging

__all__ = ['MapConfig', 'Settings', 'settings', 'configure_logging']
