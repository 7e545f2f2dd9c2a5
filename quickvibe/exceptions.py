"""Custom exceptions for quickvibe"""

from typing import Optional, Sequence


class QuickVibeError(Exception):
    """Base exception for all quickvibe errors."""
    pass


class ConfigError(QuickVibeError):
    """Exception raised when the configuration file cannot be used."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid configuration in {path}: {message}")


class CommandError(QuickVibeError):
    """Exception raised when an external command fails, times out or is missing."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        timed_out: bool = False,
    ):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        self.timed_out = timed_out

        command = " ".join(self.args_list[:3])
        if timed_out:
            error_msg = f"Command '{command}' timed out"
        elif returncode is None:
            error_msg = f"Command '{command}' could not be executed"
        else:
            error_msg = f"Command '{command}' failed (exit {returncode})"
        if self.stderr:
            error_msg += f": {self.stderr}"

        super().__init__(error_msg)


class GitOperationError(QuickVibeError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, path: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.path = path
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if path:
            error_msg += f" for '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeListError(GitOperationError):
    """Exception raised when `git worktree list` cannot be run for a repository."""

    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__("list_worktrees", path, message)


class WorktreeError(GitOperationError):
    """Exception raised when a worktree cannot be created or removed."""
    pass


class InvalidBranchNameError(QuickVibeError):
    """Exception raised when a proposed branch name is rejected."""

    def __init__(self, branch: str, reason: str):
        self.branch = branch
        self.reason = reason
        super().__init__(reason)


class ContainerError(QuickVibeError):
    """Exception raised when a container lifecycle operation fails."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"failed to {operation} container"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class DevcontainerCLINotFoundError(QuickVibeError):
    """Exception raised when the devcontainer CLI is not on PATH."""

    def __init__(self):
        super().__init__(
            "devcontainer CLI not found. Install with: npm install -g @devcontainers/cli"
        )


class ContainerRuntimeNotFoundError(QuickVibeError):
    """Exception raised when neither docker nor podman is installed."""

    def __init__(self):
        super().__init__("No container runtime found (docker or podman required)")


class TmuxNotFoundError(QuickVibeError):
    """Exception raised when tmux is not available inside the container."""

    def __init__(self):
        super().__init__(
            "tmux not found in container. Please install tmux in your devcontainer."
        )


class SessionError(QuickVibeError):
    """Exception raised for tmux session operations inside a container."""

    def __init__(self, operation: str, session: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.session = session
        self.message = message

        error_msg = f"failed to {operation} tmux session"
        if session:
            error_msg += f" '{session}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitHubAPIError(QuickVibeError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
