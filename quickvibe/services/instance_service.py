"""Turn discovered devcontainer configs into one instance per git worktree."""

import os
from typing import Iterable, List, Optional, Union, TYPE_CHECKING

from quickvibe.constants import DEVCONTAINER_DIR, DEVCONTAINER_FILE
from quickvibe.exceptions import WorktreeListError
from quickvibe.models.instance import ContainerInstance, Project
from quickvibe.services.discovery import PathFilter, ProjectScanner
from quickvibe.services.git.worktrees import WorktreeService
from quickvibe.logging_config import get_logger

if TYPE_CHECKING:
    from quickvibe.config import Config

logger = get_logger(__name__)


class _DiscoveryRun:
    """Deduplication state for a single resolve_instances call."""

    def __init__(self):
        self.instances: List[ContainerInstance] = []
        self.seen_main_repos: set[str] = set()
        self.seen_paths: set[str] = set()

    def add(self, instance: ContainerInstance) -> bool:
        if instance.path in self.seen_paths:
            return False
        self.seen_paths.add(instance.path)
        self.instances.append(instance)
        return True


class InstanceService:
    """Reconcile devcontainer projects with their git worktrees.

    A repository with a `.devcontainer/devcontainer.json` yields one
    instance per worktree, all sharing the main repository's config.
    """

    def __init__(
        self,
        config: Union["Config", dict],
        worktree_service: Optional[WorktreeService] = None,
        scanner: Optional[ProjectScanner] = None,
    ):
        self.config = config
        self.worktree_service = worktree_service or WorktreeService()
        self.scanner = scanner or ProjectScanner(
            PathFilter(config.get("max_depth"), config.get("excluded_dirs", []))
        )

    def resolve_instances(self, search_roots: Optional[Iterable[str]] = None) -> List[ContainerInstance]:
        """Discover every container instance under the search roots.

        Walk order decides which worktree and which main repository is seen
        first, so the result is deterministic for an unchanged filesystem.

        Args:
            search_roots: Overrides config.search_paths

        Returns:
            Instances without duplicates, in discovery order
        """
        roots = list(search_roots) if search_roots is not None else self.config.get("search_paths", [])
        run = _DiscoveryRun()

        for project_path, config_path in self.scanner.iter_devcontainer_configs(roots):
            self._resolve_project(run, project_path, config_path)

        logger.info(f"Resolved {len(run.instances)} container instances")
        return run.instances

    def _resolve_project(self, run: _DiscoveryRun, project_path: str, config_path: str) -> None:
        wt_info = self.worktree_service.identify(project_path)
        if wt_info is None:
            # Not a git repository: a single plain instance
            run.add(
                ContainerInstance(
                    project=Project(name=os.path.basename(project_path), path=project_path),
                    config_path=config_path,
                )
            )
            return

        main_repo = wt_info.main_repo_path
        if main_repo in run.seen_main_repos:
            return  # All of its worktrees were already emitted

        main_config_path = os.path.join(main_repo, DEVCONTAINER_DIR, DEVCONTAINER_FILE)
        if not os.path.isfile(main_config_path):
            main_config_path = config_path

        try:
            worktrees = self.worktree_service.list_worktrees(main_repo)
        except WorktreeListError as e:
            # Main repo stays unmarked so a later worktree of it gets another try
            logger.warning(f"Could not list worktrees of {main_repo}, showing {project_path} only: {e}")
            run.add(
                ContainerInstance(
                    project=Project(name=os.path.basename(project_path), path=project_path),
                    config_path=main_config_path,
                    worktree=wt_info,
                )
            )
            return

        run.seen_main_repos.add(main_repo)
        repo_name = os.path.basename(main_repo)
        for wt in worktrees:
            run.add(
                ContainerInstance(
                    project=Project(name=repo_name, path=wt.path),
                    config_path=main_config_path,
                    worktree=wt,
                )
            )
