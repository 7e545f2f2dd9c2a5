"""Core functionality for quickvibe"""

from typing import List, Optional, Union

from quickvibe.config import Config
from quickvibe.exceptions import (
    ContainerError,
    ContainerRuntimeNotFoundError,
    TmuxNotFoundError,
    WorktreeError,
)
from quickvibe.models.instance import ContainerInstance, EnrichedInstance
from quickvibe.models.issue import Issue
from quickvibe.models.session import AttachPlan, TmuxSession
from quickvibe.services.container_service import ContainerService
from quickvibe.services.git import GitHubService, WorktreeService
from quickvibe.services.instance_service import InstanceService
from quickvibe.services.status_service import StatusService
from quickvibe.services.tmux_service import TmuxService
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


class QuickVibe:
    """Entry point tying discovery, status and container control together."""

    def __init__(self, config: Union[Config, dict]):
        """Initialize QuickVibe.

        Args:
            config: Configuration dict or Config object
        """
        # Convert dict to Config if needed
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.worktree_service = WorktreeService()
        self.container_service = ContainerService(self.config)
        self.tmux_service = TmuxService(self.container_service)
        self.instance_service = InstanceService(self.config, self.worktree_service)
        self.status_service = StatusService(
            self.container_service, self.tmux_service, max_workers=self.config.workers
        )
        self.github_service = GitHubService(self.config)

    # Discovery and status

    def discover_instances(self) -> List[ContainerInstance]:
        """Find every devcontainer instance under the configured search paths."""
        return self.instance_service.resolve_instances(self.config.search_paths)

    def get_statuses(self, instances: List[ContainerInstance]) -> List[EnrichedInstance]:
        """Live status for the given instances, in the same order."""
        return self.status_service.correlate(instances)

    def load(self) -> List[EnrichedInstance]:
        """Discover instances and query their status."""
        return self.get_statuses(self.discover_instances())

    # Containers

    def start_container(self, instance: ContainerInstance) -> None:
        """Bring the container up and make sure tmux is usable inside it.

        Raises:
            DevcontainerCLINotFoundError, ContainerError, TmuxNotFoundError
        """
        self.container_service.up(instance.path)
        if not self.tmux_service.has_tmux(instance.path):
            raise TmuxNotFoundError()

    def stop_container(self, instance: ContainerInstance) -> None:
        self.container_service.stop(instance.path)

    def restart_container(self, instance: ContainerInstance) -> None:
        self.container_service.restart(instance.path)

    # Sessions

    def list_sessions(self, instance: ContainerInstance) -> List[TmuxSession]:
        return self.tmux_service.list_sessions(instance.path)

    def create_session(self, instance: ContainerInstance, name: Optional[str] = None) -> str:
        """Create a session (default name from config) and return its name."""
        session_name = name or self.config.default_session_name
        self.tmux_service.create_session(
            instance.path, session_name, command=self.config.launch_command
        )
        return session_name

    def kill_session(self, instance: ContainerInstance, name: str) -> None:
        self.tmux_service.kill_session(instance.path, name)

    def attach_plan(self, instance: ContainerInstance, session_name: str) -> AttachPlan:
        """Instructions for replacing this process with the attached session."""
        return self.tmux_service.attach_plan(instance.path, session_name)

    # Worktrees

    def create_worktree(self, instance: ContainerInstance, branch_name: str) -> str:
        """Create a new worktree of the instance's repository.

        Returns:
            Path of the new worktree

        Raises:
            InvalidBranchNameError, WorktreeError
        """
        return self.worktree_service.create_worktree(instance.path, branch_name)

    def remove_worktree(self, instance: ContainerInstance) -> None:
        """Stop the worktree's container and remove the worktree.

        Raises:
            WorktreeError: If the instance is not a linked worktree or removal fails
        """
        if not instance.is_worktree:
            raise WorktreeError("remove_worktree", instance.path, "not a linked worktree")

        try:
            self.container_service.stop(instance.path)
        except (ContainerError, ContainerRuntimeNotFoundError) as e:
            logger.debug(f"No container stopped for {instance.path}: {e}")

        success, error = self.worktree_service.remove_worktree(
            instance.path, instance.worktree.main_repo_path
        )
        if not success:
            raise WorktreeError("remove_worktree", instance.path, error)

    # GitHub

    def list_issues(self, instance: ContainerInstance) -> List[Issue]:
        """Issues of the GitHub repository behind an instance.

        Raises:
            GitHubAPIError
        """
        repo_path = instance.worktree.main_repo_path if instance.worktree else instance.path
        owner, repo = self.github_service.detect_repository(repo_path)
        return self.github_service.fetch_issues(owner, repo)

    def create_worktree_for_issue(self, instance: ContainerInstance, issue: Issue) -> str:
        """Create a worktree on a branch named after a GitHub issue."""
        return self.create_worktree(instance, self.github_service.branch_name_for_issue(issue))

    def close(self) -> None:
        """Release external resources."""
        self.github_service.close()
