"""Container runtime and devcontainer CLI service"""

import os
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

from quickvibe.constants import DEVCONTAINER_LABEL, STATUS_QUERY_TIMEOUT
from quickvibe.exceptions import (
    CommandError,
    ContainerError,
    ContainerRuntimeNotFoundError,
    DevcontainerCLINotFoundError,
)
from quickvibe.models.instance import ContainerStatus
from quickvibe.utils.process import run_command, which
from quickvibe.logging_config import get_logger

if TYPE_CHECKING:
    from quickvibe.config import Config

logger = get_logger(__name__)

SUPPORTED_RUNTIMES = ("docker", "podman")


def label_filter(workspace_folder: str) -> str:
    """Exact-match label filter for the containers of a workspace folder."""
    return f"label={DEVCONTAINER_LABEL}={workspace_folder}"


def parse_container_ids(output: str) -> List[str]:
    """Parse `ps -q` output into container ids, one per non-empty line."""
    return [line.strip() for line in output.splitlines() if line.strip()]


class ContainerService:
    """Query and drive devcontainers through docker/podman and the devcontainer CLI."""

    def __init__(self, config: Union["Config", dict], runtime: Optional[str] = None):
        """Initialize the service.

        Args:
            config: Configuration dictionary or Config object
            runtime: Container runtime executable (auto-detected when None)
        """
        self.config = config
        self._runtime = runtime

    @property
    def runtime(self) -> str:
        """Container runtime executable, docker preferred over podman.

        Raises:
            ContainerRuntimeNotFoundError: If neither is installed
        """
        if self._runtime is None:
            for candidate in SUPPORTED_RUNTIMES:
                if which(candidate):
                    self._runtime = candidate
                    break
            else:
                raise ContainerRuntimeNotFoundError()
        return self._runtime

    @staticmethod
    def check_cli() -> None:
        """Verify the devcontainer CLI is installed.

        Raises:
            DevcontainerCLINotFoundError: If it is not on PATH
        """
        if which("devcontainer") is None:
            raise DevcontainerCLINotFoundError()

    @staticmethod
    def exec_args(workspace_folder: str, command: List[str]) -> List[str]:
        """Arguments running command inside the container of a workspace folder."""
        return ["devcontainer", "exec", "--workspace-folder", workspace_folder, *command]

    def _find_containers(self, workspace_folder: str, *extra: str, timeout: Optional[float] = None) -> List[str]:
        output = run_command(
            [self.runtime, "ps", *extra, "-q", "--filter", label_filter(workspace_folder)],
            timeout=timeout,
        )
        return parse_container_ids(output)

    def get_status(self, workspace_folder: str) -> Tuple[ContainerStatus, str]:
        """Look up the container of a workspace folder.

        Running containers are checked first, then exited ones. A failed
        query reports UNKNOWN and never STOPPED.

        Returns:
            Tuple of (status, container_id); container_id is "" when unknown
        """
        try:
            running = self._find_containers(workspace_folder, timeout=STATUS_QUERY_TIMEOUT)
            if running:
                return ContainerStatus.RUNNING, running[0]

            stopped = self._find_containers(
                workspace_folder, "-a", "--filter", "status=exited", timeout=STATUS_QUERY_TIMEOUT
            )
            if stopped:
                return ContainerStatus.STOPPED, stopped[0]
        except (CommandError, ContainerRuntimeNotFoundError) as e:
            logger.debug(f"Status query failed for {workspace_folder}: {e}")
            return ContainerStatus.UNKNOWN, ""

        # Never started
        return ContainerStatus.UNKNOWN, ""

    def up(self, workspace_folder: str) -> None:
        """Start (building if needed) the devcontainer of a workspace folder.

        Raises:
            DevcontainerCLINotFoundError: If the devcontainer CLI is missing
            ContainerError: With the CLI's stderr when start-up fails
        """
        self.check_cli()
        timeout = self.config.get("container_timeout_seconds")
        logger.info(f"Starting devcontainer for {workspace_folder}")
        try:
            run_command(
                ["devcontainer", "up", "--workspace-folder", workspace_folder],
                timeout=timeout,
                cwd=workspace_folder if os.path.isdir(workspace_folder) else None,
            )
        except CommandError as e:
            if e.timed_out:
                raise ContainerError("start", f"timed out after {timeout}s") from e
            raise ContainerError("start", e.stderr or str(e)) from e

    def stop(self, workspace_folder: str) -> None:
        """Stop the running container of a workspace folder.

        Raises:
            ContainerError: If there is no running container or stopping fails
        """
        try:
            running = self._find_containers(workspace_folder, timeout=STATUS_QUERY_TIMEOUT)
        except CommandError as e:
            raise ContainerError("find", str(e)) from e
        if not running:
            raise ContainerError("stop", "no running container found for project")

        try:
            run_command([self.runtime, "stop", running[0]])
        except CommandError as e:
            raise ContainerError("stop", e.stderr or str(e)) from e
        logger.info(f"Stopped container {running[0]} for {workspace_folder}")

    def restart(self, workspace_folder: str) -> None:
        """Restart the container of a workspace folder, starting one if none exists.

        Raises:
            ContainerError: If the restart fails
        """
        try:
            containers = self._find_containers(workspace_folder, "-a", timeout=STATUS_QUERY_TIMEOUT)
        except CommandError as e:
            raise ContainerError("find", str(e)) from e
        if not containers:
            self.up(workspace_folder)
            return

        try:
            run_command([self.runtime, "restart", containers[0]])
        except CommandError as e:
            raise ContainerError("restart", e.stderr or str(e)) from e
        logger.info(f"Restarted container {containers[0]} for {workspace_folder}")
