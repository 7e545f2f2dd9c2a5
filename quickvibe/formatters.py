"""Formatting utilities shared by the CLI table and the TUI."""

import os
from typing import Optional

from quickvibe.constants import (
    STATUS_DISPLAY,
    SYMBOL_RUNNING,
    SYMBOL_STOPPED,
    SYMBOL_UNKNOWN,
)
from quickvibe.models.instance import ContainerStatus, EnrichedInstance
from quickvibe.models.session import TmuxSession

_STATUS_SYMBOLS = {
    ContainerStatus.RUNNING: SYMBOL_RUNNING,
    ContainerStatus.STOPPED: SYMBOL_STOPPED,
    ContainerStatus.UNKNOWN: SYMBOL_UNKNOWN,
}


def format_status(status: ContainerStatus) -> str:
    """
    Format container status as display text.

    Args:
        status: Container status enum value

    Returns:
        Symbol followed by the display name, e.g. "● running"
    """
    return f"{_STATUS_SYMBOLS[status]} {STATUS_DISPLAY.get(status.value, status.value)}"


def format_sessions(item: EnrichedInstance) -> str:
    """Session count, blank unless the container is running."""
    if not item.is_running:
        return ""
    return str(item.session_count)


def format_branch(item: EnrichedInstance) -> str:
    return item.instance.branch or ""


def format_session(session: TmuxSession) -> str:
    return f"{session.name}  (attached)" if session.attached else session.name


def shorten_home(path: str, home: Optional[str] = None) -> str:
    """Replace the home directory prefix with ~."""
    home = home or os.path.expanduser("~")
    if home and home != os.sep and (path == home or path.startswith(home + os.sep)):
        return "~" + path[len(home):]
    return path


def truncate_path(path: str, max_len: int) -> str:
    """
    Shorten a path from the left so it fits within max_len characters.

    Args:
        path: Path to shorten
        max_len: Maximum width; values <= 0 fall back to 40

    Returns:
        The path, or "..." followed by its tail
    """
    if max_len <= 0:
        max_len = 40
    if len(path) <= max_len:
        return path
    if max_len <= 3:
        return path[-max_len:]
    return "..." + path[len(path) - max_len + 3:]


_ACTION_VERBS = {
    "start": "Starting",
    "stop": "Stopping",
    "restart": "Restarting",
}


def format_progress(action: str, name: str) -> str:
    """Status-bar text for a container action in flight, e.g. "Stopping web..."."""
    verb = _ACTION_VERBS.get(action, action.capitalize())
    return f"{verb} {name}..."
