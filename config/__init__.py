"""Configuration management package for mctoolkit"""

from .loader import ConfigLoader, Settings, load_settings

__all__ = [
    "ConfigLoader",
    "Settings",
    "load_settings",
]
