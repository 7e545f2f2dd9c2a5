"""Worktree data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WorktreeInfo:
    """One working tree of a git repository."""

    path: str
    branch: str
    main_repo_path: str
    git_metadata_path: str  # <main>/.git for main, <main>/.git/worktrees/<name> otherwise
    is_main: bool

    def __str__(self) -> str:
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch} @ {self.path}{main_marker}"
