"""Git-related services for quickvibe."""

from .worktrees import WorktreeService, parse_worktree_porcelain, parse_gitdir_file
from .github import GitHubService, parse_github_url

__all__ = [
    "WorktreeService",
    "GitHubService",
    "parse_worktree_porcelain",
    "parse_gitdir_file",
    "parse_github_url",
]
