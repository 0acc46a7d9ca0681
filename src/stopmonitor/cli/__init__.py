"""
Command-line interface for the stopmonitor package.

This module provides the main CLI entry point for the dashboard.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
