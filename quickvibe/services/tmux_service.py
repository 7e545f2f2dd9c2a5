"""tmux session management inside devcontainers"""

import shlex
from typing import List, Optional

from quickvibe.constants import (
    STATUS_QUERY_TIMEOUT,
    TMUX_NO_SESSIONS_EXIT_CODE,
    TMUX_SESSION_FORMAT,
)
from quickvibe.exceptions import CommandError, SessionError
from quickvibe.models.session import AttachPlan, TmuxSession
from quickvibe.services.container_service import ContainerService
from quickvibe.utils.process import run_command, which
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


def parse_sessions(output: str) -> List[TmuxSession]:
    """Parse `tmux list-sessions -F "#{session_name}:#{session_attached}"` output.

    Session names may themselves contain ':', so the flag is taken from
    the last field.
    """
    sessions: List[TmuxSession] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        name, sep, attached = line.rpartition(":")
        if not sep:
            sessions.append(TmuxSession(name=line))
            continue
        sessions.append(TmuxSession(name=name, attached=attached.strip() not in ("", "0")))
    return sessions


def validate_session_name(name: str) -> None:
    """
    Check a tmux session name.

    Raises:
        SessionError: If the name is empty or contains characters tmux rewrites
    """
    if not name or not name.strip():
        raise SessionError("create", message="session name cannot be empty")
    for ch in (":", "."):
        if ch in name:
            raise SessionError("create", name, f"session name cannot contain '{ch}'")


class TmuxService:
    """Drive tmux inside a container through `devcontainer exec`."""

    def __init__(self, container_service: ContainerService):
        self.container_service = container_service

    def _exec(self, workspace_folder: str, command: List[str], timeout: Optional[float] = None) -> str:
        return run_command(
            self.container_service.exec_args(workspace_folder, command), timeout=timeout
        )

    def list_sessions(self, workspace_folder: str) -> List[TmuxSession]:
        """List tmux sessions in the container.

        tmux exits with code 1 when no server is running, which means there
        are no sessions rather than an error.

        Raises:
            SessionError: If listing fails for any other reason
        """
        try:
            output = self._exec(
                workspace_folder,
                ["tmux", "list-sessions", "-F", TMUX_SESSION_FORMAT],
                timeout=STATUS_QUERY_TIMEOUT,
            )
        except CommandError as e:
            if e.returncode == TMUX_NO_SESSIONS_EXIT_CODE:
                return []
            raise SessionError("list", message=str(e)) from e
        return parse_sessions(output)

    def count_sessions(self, workspace_folder: str) -> int:
        """Number of sessions, 0 when they cannot be listed."""
        try:
            return len(self.list_sessions(workspace_folder))
        except SessionError as e:
            logger.debug(f"Could not count sessions for {workspace_folder}: {e}")
            return 0

    def has_tmux(self, workspace_folder: str) -> bool:
        """Check whether tmux is installed in the container."""
        try:
            self._exec(workspace_folder, ["which", "tmux"], timeout=STATUS_QUERY_TIMEOUT)
            return True
        except CommandError:
            return False

    def create_session(self, workspace_folder: str, name: str, command: Optional[str] = None) -> None:
        """Create a detached session, optionally running a launch command.

        Raises:
            SessionError: With tmux's stderr on failure
        """
        validate_session_name(name)
        args = ["tmux", "new-session", "-d", "-s", name]
        if command:
            args.extend(shlex.split(command))
        try:
            self._exec(workspace_folder, args)
        except CommandError as e:
            raise SessionError("create", name, e.stderr or str(e)) from e
        logger.info(f"Created tmux session {name} in {workspace_folder}")

    def kill_session(self, workspace_folder: str, name: str) -> None:
        """Kill a session by name.

        Raises:
            SessionError: With tmux's stderr on failure
        """
        try:
            self._exec(workspace_folder, ["tmux", "kill-session", "-t", name])
        except CommandError as e:
            raise SessionError("kill", name, e.stderr or str(e)) from e
        logger.info(f"Killed tmux session {name} in {workspace_folder}")

    def attach_plan(self, workspace_folder: str, name: str) -> AttachPlan:
        """Build the command that attaches the terminal to a session.

        Raises:
            DevcontainerCLINotFoundError: If the devcontainer CLI is missing
        """
        self.container_service.check_cli()
        argv = self.container_service.exec_args(
            workspace_folder, ["tmux", "attach-session", "-t", name]
        )
        return AttachPlan(
            executable=which("devcontainer") or "devcontainer",
            argv=argv,
            workspace_folder=workspace_folder,
            session_name=name,
        )
