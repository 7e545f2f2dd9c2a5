"""Shared constants for quickvibe."""

from dataclasses import dataclass
from typing import List


# Discovery defaults
DEFAULT_MAX_DEPTH = 3
DEFAULT_EXCLUDED_DIRS = [
    "node_modules",
    "vendor",
    "__pycache__",
    "venv",
    "dist",
    "build",
    "target",
    "Library",
]

DEVCONTAINER_DIR = ".devcontainer"
DEVCONTAINER_FILE = "devcontainer.json"

# Label the devcontainer CLI puts on every container it creates
DEVCONTAINER_LABEL = "devcontainer.local_folder"

# Sessions
DEFAULT_SESSION_NAME = "main"
TMUX_SESSION_FORMAT = "#{session_name}:#{session_attached}"
TMUX_NO_SESSIONS_EXIT_CODE = 1

# Timeouts (seconds)
DEFAULT_CONTAINER_TIMEOUT = 300
MIN_CONTAINER_TIMEOUT = 30
MAX_CONTAINER_TIMEOUT = 1800
STATUS_QUERY_TIMEOUT = 15

# Git
UNKNOWN_BRANCH = "unknown"
SHORT_SHA_LENGTH = 7
RESERVED_BRANCH_NAMES = ["main", "master"]

# GitHub
DEFAULT_MAX_ISSUES = 50
DEFAULT_BRANCH_PREFIX = "issue-"
ISSUE_STATES = ["open", "closed", "all"]


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


# Unified column definitions for both CLI and TUI
COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("name", "Instance", 30),
    ColumnDefinition("status", "Status", 10),
    ColumnDefinition("sessions", "Sessions", 8),
    ColumnDefinition("branch", "Branch", 20),
    ColumnDefinition("path", "Path", 0),
]


# Symbol constants
SYMBOL_RUNNING = "●"
SYMBOL_STOPPED = "○"
SYMBOL_UNKNOWN = "?"
SYMBOL_ATTACHED = "*"
NEW_SESSION_LABEL = "+ New session"


# Status display names
STATUS_DISPLAY = {
    "running": "running",
    "stopped": "stopped",
    "unknown": "-",
}


# CLI colors (Rich color names)
CLI_COLORS = {
    "running": "green",
    "stopped": "yellow",
    "unknown": None,  # Default color
}


# TUI colors (color names for Textual)
TUI_COLORS = {
    "running": "green",
    "stopped": "yellow",
    "unknown": "grey50",
}


# Legend text for the TUI
LEGEND_TEXT = """
Legend:
● = Container running     ○ = Container stopped
- = No container yet (or status query failed)
name [branch] = Git worktree of the repository "name"

Keys:
Enter = Start container and pick a tmux session
x = Stop    R = Restart    r = Refresh
n = New worktree    g = Worktree from GitHub issue
d = Delete worktree    c = Show configuration
"""
