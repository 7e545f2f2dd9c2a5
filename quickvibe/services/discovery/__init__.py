"""Devcontainer project discovery for quickvibe."""

from .path_filter import PathFilter
from .scanner import ProjectScanner

__all__ = [
    "PathFilter",
    "ProjectScanner",
]
