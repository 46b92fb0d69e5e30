"""CLI package for mctoolkit

This package provides a small command-line interface for signing in with a
Microsoft account and managing the local instance store.
"""

from cli.main import build_parser, main

__all__ = [
    "build_parser",
    "main",
]
