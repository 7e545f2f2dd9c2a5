"""Filesystem walk that finds devcontainer projects."""

import os
from typing import Iterable, Iterator, List, Tuple

from quickvibe.constants import DEVCONTAINER_DIR, DEVCONTAINER_FILE
from quickvibe.models.instance import Project
from quickvibe.services.discovery.path_filter import PathFilter
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


class ProjectScanner:
    """Walk search roots looking for devcontainer.json files."""

    def __init__(self, path_filter: PathFilter):
        """Initialize the scanner.

        Args:
            path_filter: Decides which directories the walk may enter
        """
        self.path_filter = path_filter

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        # Unreadable directories are treated as empty
        logger.debug(f"Skipping unreadable path: {error}")

    def _iter_config_files(self, root: str) -> Iterator[str]:
        """Yield every devcontainer.json under root the filter allows, in sorted order."""
        depth_of = PathFilter.depth_of
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            # Prune in place so os.walk never enters skipped directories
            dirnames[:] = sorted(
                name
                for name in dirnames
                if self.path_filter.should_descend(
                    name, True, depth_of(root, os.path.join(dirpath, name))
                )
            )

            if DEVCONTAINER_FILE not in filenames:
                continue
            config_path = os.path.join(dirpath, DEVCONTAINER_FILE)
            if self.path_filter.should_descend(
                DEVCONTAINER_FILE, False, depth_of(root, config_path)
            ):
                yield config_path

    @staticmethod
    def _normalize_roots(search_roots: Iterable[str]) -> List[str]:
        return [os.path.abspath(os.path.expanduser(root)) for root in search_roots]

    def discover(self, search_roots: Iterable[str]) -> List[Project]:
        """Find all devcontainer projects under the search roots.

        Both `.devcontainer/devcontainer.json` and the legacy
        `devcontainer.json` at the project root are recognised. A project
        is reported once even when search roots overlap.

        Args:
            search_roots: Directories to walk, in priority order

        Returns:
            Projects in discovery order
        """
        projects: List[Project] = []
        seen: set[str] = set()

        for root in self._normalize_roots(search_roots):
            for config_path in self._iter_config_files(root):
                config_dir = os.path.dirname(config_path)
                if os.path.basename(config_dir) == DEVCONTAINER_DIR:
                    project_path = os.path.dirname(config_dir)
                else:
                    project_path = config_dir

                if project_path in seen:
                    continue
                seen.add(project_path)
                projects.append(Project(name=os.path.basename(project_path), path=project_path))

        logger.debug(f"Discovered {len(projects)} devcontainer projects")
        return projects

    def iter_devcontainer_configs(self, search_roots: Iterable[str]) -> Iterator[Tuple[str, str]]:
        """Yield (project_path, config_path) for canonical configs only.

        Only `<project>/.devcontainer/devcontainer.json` qualifies, since that
        is the layout worktrees can share. Pairs are not deduplicated here.
        """
        for root in self._normalize_roots(search_roots):
            for config_path in self._iter_config_files(root):
                config_dir = os.path.dirname(config_path)
                if os.path.basename(config_dir) != DEVCONTAINER_DIR:
                    continue
                yield os.path.dirname(config_dir), config_path
