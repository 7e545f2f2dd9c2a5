"""Name and depth predicate deciding which directories discovery may enter."""

import os
from typing import Iterable

from quickvibe.constants import DEVCONTAINER_DIR


class PathFilter:
    """Decide whether a directory walk may enter (or consider) an entry.

    Rules, applied in order:
    1. hidden directories are skipped, except .devcontainer
    2. directories named in the exclusion set are skipped
    3. anything deeper than max_depth below the root is skipped
    """

    def __init__(self, max_depth: int, excluded_dirs: Iterable[str] = ()):
        if max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {max_depth}")
        self.max_depth = max_depth
        self.excluded_dirs = frozenset(excluded_dirs)

    def should_descend(self, name: str, is_dir: bool, depth: int) -> bool:
        """
        Check whether an entry may be entered (directories) or considered (files).

        Args:
            name: Base name of the entry
            is_dir: True for directories
            depth: Path separators between the search root and the entry

        Returns:
            True to enter, False to skip
        """
        if is_dir:
            if name.startswith(".") and name != DEVCONTAINER_DIR:
                return False
            if name in self.excluded_dirs:
                return False
        return depth <= self.max_depth

    @staticmethod
    def depth_of(root: str, path: str) -> int:
        """Depth of path below root, counted in path separators.

        The root's direct children have depth 0.
        """
        rel_path = os.path.relpath(path, root)
        if rel_path == os.curdir:
            return 0
        return rel_path.count(os.sep)
