"""Utility functions for quickvibe.

This package provides utility modules:
- process: running docker, devcontainer and tmux commands
"""

from .process import run_command, which

__all__ = [
    "run_command",
    "which",
]
