"""Shared utilities package for mctoolkit"""

from .debug_console import DebugCapturingConsole, create_console
from .logging_setup import setup_logging

__all__ = [
    "DebugCapturingConsole",
    "create_console",
    "setup_logging",
]
