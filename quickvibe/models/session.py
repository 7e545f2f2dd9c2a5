"""tmux session and terminal hand-off models."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class TmuxSession:
    """A tmux session running inside a container."""
    name: str
    attached: bool = False

    def __str__(self) -> str:
        return f"{self.name} (attached)" if self.attached else self.name


@dataclass(frozen=True)
class AttachPlan:
    """Instructions for handing the terminal over to a session in a container.

    The core only builds this; the CLI replaces its own process with it
    once the TUI has exited.
    """
    executable: str
    argv: List[str] = field(default_factory=list)
    workspace_folder: str = ""
    session_name: str = ""
