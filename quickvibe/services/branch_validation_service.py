"""Branch name validation service for quickvibe."""

import re

from quickvibe.constants import RESERVED_BRANCH_NAMES
from quickvibe.exceptions import InvalidBranchNameError

# Deliberately stricter than git: the name also becomes a directory name
_INVALID_CHAR = re.compile(r"[^A-Za-z0-9_/-]")


class BranchValidationService:
    """Service for validating names of branches created for new worktrees."""

    @staticmethod
    def validate_branch_name(name: str) -> None:
        """
        Check that a branch name is acceptable for a new worktree.

        Args:
            name: Proposed branch name

        Raises:
            InvalidBranchNameError: With a human readable reason
        """
        if not name:
            raise InvalidBranchNameError(name, "branch name cannot be empty")
        if name in RESERVED_BRANCH_NAMES:
            raise InvalidBranchNameError(name, f"'{name}' is a reserved branch name")
        if name.startswith("-"):
            raise InvalidBranchNameError(name, "branch name cannot start with '-'")
        if name.startswith(".") or name.endswith("."):
            raise InvalidBranchNameError(name, "branch name cannot start or end with '.'")
        if ".." in name:
            raise InvalidBranchNameError(name, "branch name cannot contain '..'")

        match = _INVALID_CHAR.search(name)
        if match:
            raise InvalidBranchNameError(
                name, f"branch name contains invalid character: {match.group()}"
            )

    @staticmethod
    def is_valid_branch_name(name: str) -> bool:
        """
        Check a branch name without raising.

        Args:
            name: Proposed branch name

        Returns:
            True if validate_branch_name would accept it
        """
        try:
            BranchValidationService.validate_branch_name(name)
        except InvalidBranchNameError:
            return False
        return True
