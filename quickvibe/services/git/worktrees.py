"""Worktree operations service for quickvibe."""

import os
from typing import Optional, Dict, Any, List

import git

from quickvibe.constants import UNKNOWN_BRANCH, SHORT_SHA_LENGTH
from quickvibe.exceptions import WorktreeListError, WorktreeError
from quickvibe.models.worktree import WorktreeInfo
from quickvibe.services.branch_validation_service import BranchValidationService
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)

GITDIR_PREFIX = "gitdir: "


def _describe_git_error(command: str, error: git.exc.CommandError) -> str:
    """Turn a GitPython command error into the tool's own diagnostic text."""
    stderr = (error.stderr if getattr(error, "stderr", None) else str(error)).strip()
    # GitPython prefixes captured stderr with "stderr: '...'"
    if stderr.startswith("stderr: "):
        stderr = stderr[len("stderr: "):].strip("'").strip()
    status = getattr(error, "status", "unknown")

    if stderr:
        return f"{command} failed (exit {status}): {stderr}"
    return f"{command} failed with exit code {status}"


def _linked_git_metadata_path(main_repo_path: str, worktree_path: str) -> str:
    return os.path.join(main_repo_path, ".git", "worktrees", os.path.basename(worktree_path))


def parse_gitdir_file(content: str) -> Optional[str]:
    """Parse the `.git` file of a linked worktree.

    Args:
        content: File contents, e.g. "gitdir: /repo/.git/worktrees/feat"

    Returns:
        The gitdir path, or None if the content is not a gitdir pointer
    """
    line = content.strip()
    if not line.startswith(GITDIR_PREFIX):
        return None
    gitdir = line[len(GITDIR_PREFIX):].strip()
    return gitdir or None


def main_repo_from_gitdir(gitdir: str) -> str:
    """Main repository root for a `<main>/.git/worktrees/<name>` gitdir."""
    git_dir = os.path.dirname(os.path.dirname(os.path.normpath(gitdir)))  # up past worktrees/<name>
    return os.path.dirname(git_dir)  # up past .git


def parse_worktree_porcelain(output: str, main_repo_path: Optional[str] = None) -> List[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Format (records separated by blank lines, main worktree first):
        worktree /path/to/worktree
        HEAD <sha>
        branch refs/heads/<name>      (or "detached")

    Args:
        output: Raw command output
        main_repo_path: Repository the listing was taken from; defaults to
            the path of the first record

    Returns:
        WorktreeInfo for every record, in listing order
    """
    worktrees: List[WorktreeInfo] = []
    main_repo = main_repo_path

    def finish(record: Dict[str, Any]) -> None:
        nonlocal main_repo
        path = record.get("path")
        if not path:
            return
        is_main = not worktrees
        if is_main:
            if main_repo is None:
                main_repo = path
            worktrees.append(
                WorktreeInfo(
                    path=path,
                    branch=record.get("branch", ""),
                    main_repo_path=path,
                    git_metadata_path=os.path.join(path, ".git"),
                    is_main=True,
                )
            )
        else:
            worktrees.append(
                WorktreeInfo(
                    path=path,
                    branch=record.get("branch", ""),
                    main_repo_path=main_repo,
                    git_metadata_path=_linked_git_metadata_path(main_repo, path),
                    is_main=False,
                )
            )

    current: Dict[str, Any] = {}
    for line in output.split("\n"):
        line = line.strip()

        if not line:
            # Empty line marks end of a record
            finish(current)
            current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line[len("worktree "):]
        elif line.startswith("branch refs/heads/"):
            current["branch"] = line[len("branch refs/heads/"):]
        elif line.startswith("HEAD "):
            # Detached HEAD: short sha stands in for the branch name
            if not current.get("branch"):
                current["branch"] = line[len("HEAD "):][:SHORT_SHA_LENGTH]

    # Last record when output has no trailing blank line
    finish(current)

    return worktrees


class WorktreeService:
    """Service for inspecting and managing git worktrees."""

    @staticmethod
    def _git(path: str) -> git.Git:
        """Get a git command wrapper running in path.

        A fresh wrapper per call keeps the service safe to use from threads.
        """
        return git.Git(path)

    def get_branch(self, path: str) -> str:
        """Current branch of the working tree at path.

        Returns:
            Branch name, the short sha when detached, or "unknown" on failure
        """
        try:
            g = self._git(path)
            branch = g.rev_parse("--abbrev-ref", "HEAD").strip()
            if branch == "HEAD":
                branch = g.rev_parse(f"--short={SHORT_SHA_LENGTH}", "HEAD").strip()
            return branch or UNKNOWN_BRANCH
        except git.exc.CommandError as e:
            logger.debug(f"Could not read branch for {path}: {e}")
            return UNKNOWN_BRANCH

    def identify(self, path: str) -> Optional[WorktreeInfo]:
        """Work out whether path is a main repository or a linked worktree.

        Args:
            path: Directory to inspect

        Returns:
            WorktreeInfo, or None if path is not a git working tree
        """
        git_path = os.path.join(path, ".git")

        if os.path.isdir(git_path):
            return WorktreeInfo(
                path=path,
                branch=self.get_branch(path),
                main_repo_path=path,
                git_metadata_path=git_path,
                is_main=True,
            )

        if not os.path.isfile(git_path):
            return None

        try:
            with open(git_path, encoding="utf-8") as f:
                gitdir = parse_gitdir_file(f.read())
        except OSError as e:
            logger.debug(f"Could not read {git_path}: {e}")
            return None

        if gitdir is None:
            logger.debug(f"{git_path} is not a gitdir pointer")
            return None
        if not os.path.isabs(gitdir):
            gitdir = os.path.normpath(os.path.join(path, gitdir))

        return WorktreeInfo(
            path=path,
            branch=self.get_branch(path),
            main_repo_path=main_repo_from_gitdir(gitdir),
            git_metadata_path=gitdir,
            is_main=False,
        )

    def get_main_repo(self, path: str) -> str:
        """Main repository path for any worktree path.

        Raises:
            WorktreeError: If path is not a git repository or worktree
        """
        info = self.identify(path)
        if info is None:
            raise WorktreeError("find_main_repo", path, "not a git repository or worktree")
        return info.main_repo_path

    def list_worktrees(self, main_repo_path: str) -> List[WorktreeInfo]:
        """List all worktrees of a repository, main worktree first.

        Args:
            main_repo_path: Path of the main repository

        Returns:
            WorktreeInfo for every worktree

        Raises:
            WorktreeListError: If git cannot produce the listing
        """
        try:
            output = self._git(main_repo_path).worktree("list", "--porcelain")
        except git.exc.CommandError as e:
            raise WorktreeListError(
                main_repo_path, _describe_git_error("git worktree list", e)
            ) from e

        worktrees = parse_worktree_porcelain(output, main_repo_path)
        logger.debug(f"Found {len(worktrees)} worktrees for {main_repo_path}")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def create_worktree(self, repo_path: str, branch_name: str) -> str:
        """Create a worktree on a new branch next to the main repository.

        The directory is `<main-repo>-<branch>` with slashes in the branch
        replaced by dashes.

        Args:
            repo_path: Main repository or any of its worktrees
            branch_name: New branch to create

        Returns:
            Path of the new worktree

        Raises:
            InvalidBranchNameError: If the branch name is rejected
            WorktreeError: If the worktree cannot be created
        """
        BranchValidationService.validate_branch_name(branch_name)

        info = self.identify(repo_path)
        if info is None:
            raise WorktreeError("create_worktree", repo_path, "not a git repository")
        main_repo = info.main_repo_path

        dir_name = f"{os.path.basename(main_repo)}-{branch_name.replace('/', '-')}"
        worktree_path = os.path.join(os.path.dirname(main_repo), dir_name)
        if os.path.exists(worktree_path):
            raise WorktreeError(
                "create_worktree", worktree_path, "worktree directory already exists"
            )

        try:
            self._git(main_repo).worktree("add", "-b", branch_name, worktree_path)
        except git.exc.CommandError as e:
            error_msg = _describe_git_error("git worktree add", e)
            logger.error(f"Failed to create worktree at {worktree_path}: {error_msg}")
            raise WorktreeError("create_worktree", worktree_path, error_msg) from e

        logger.info(f"Created worktree at {worktree_path} on branch {branch_name}")
        return worktree_path

    def remove_worktree(
        self, path: str, main_repo_path: Optional[str] = None
    ) -> tuple[bool, Optional[str]]:
        """Remove a linked worktree.

        If `git worktree remove` fails, stale metadata is pruned and the
        removal counts as done only if the worktree is gone from the listing.

        Args:
            path: Worktree directory (may already be deleted)
            main_repo_path: Used when path no longer identifies its repository

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        info = self.identify(path)
        if info is not None:
            if info.is_main:
                return False, "cannot remove the main worktree"
            main_repo = info.main_repo_path
        elif main_repo_path:
            main_repo = main_repo_path
        else:
            return False, "not a git worktree"

        try:
            self._git(main_repo).worktree("remove", "--force", path)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.CommandError as e:
            error_msg = _describe_git_error("git worktree remove", e)
            logger.warning(f"Failed to remove worktree at {path}: {error_msg}, trying prune")

        pruned, _ = self.prune_worktrees(main_repo)
        if pruned and not self._is_listed(main_repo, path):
            logger.info(f"Worktree {path} cleaned up by prune")
            return True, None

        logger.error(f"Failed to remove worktree at {path}: {error_msg}")
        return False, error_msg

    def prune_worktrees(self, main_repo_path: str) -> tuple[bool, Optional[str]]:
        """Prune stale worktree metadata.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._git(main_repo_path).worktree("prune")
            logger.info(f"Pruned stale worktree metadata in {main_repo_path}")
            return True, None
        except git.exc.CommandError as e:
            error_msg = _describe_git_error("git worktree prune", e)
            logger.error(f"Failed to prune worktrees: {error_msg}")
            return False, error_msg

    def _is_listed(self, main_repo_path: str, path: str) -> bool:
        try:
            worktrees = self.list_worktrees(main_repo_path)
        except WorktreeListError:
            return True
        target = os.path.normpath(path)
        return any(os.path.normpath(wt.path) == target for wt in worktrees)
