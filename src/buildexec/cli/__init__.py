"""
Command-line interface for the buildexec package.

This module provides the main CLI entry point for running external tools.
"""

from .main import main, main_cli

__all__ = [
    "main",
    "main_cli",
]
