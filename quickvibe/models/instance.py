"""Devcontainer project and instance models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from quickvibe.models.worktree import WorktreeInfo


class ContainerStatus(Enum):
    """Runtime status of a devcontainer, derived on every query."""
    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Project:
    """A directory holding a devcontainer configuration."""
    name: str
    path: str


@dataclass(frozen=True)
class ContainerInstance:
    """One attachable unit of work: a project or one worktree of it.

    Worktrees never carry their own config; config_path always points at the
    main repository's devcontainer.json.
    """
    project: Project
    config_path: str
    worktree: Optional[WorktreeInfo] = None  # None when the project is not a git repository

    @property
    def name(self) -> str:
        return self.project.name

    @property
    def path(self) -> str:
        return self.project.path

    @property
    def branch(self) -> Optional[str]:
        return self.worktree.branch if self.worktree else None

    @property
    def is_worktree(self) -> bool:
        """True for linked (non-main) worktrees."""
        return self.worktree is not None and not self.worktree.is_main

    @property
    def display_name(self) -> str:
        if self.is_worktree:
            return f"{self.project.name} [{self.worktree.branch}]"
        return self.project.name


@dataclass(frozen=True)
class EnrichedInstance:
    """A ContainerInstance together with its live status."""
    instance: ContainerInstance
    status: ContainerStatus = ContainerStatus.UNKNOWN
    container_id: str = ""
    session_count: int = 0

    @property
    def name(self) -> str:
        return self.instance.name

    @property
    def path(self) -> str:
        return self.instance.path

    @property
    def display_name(self) -> str:
        return self.instance.display_name

    @property
    def is_running(self) -> bool:
        return self.status == ContainerStatus.RUNNING
