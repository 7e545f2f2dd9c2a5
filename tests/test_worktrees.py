"""Tests for WorktreeService and the worktree parsers"""
import os
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest
import git

from quickvibe.exceptions import InvalidBranchNameError, WorktreeError, WorktreeListError
from quickvibe.services.git import WorktreeService, parse_gitdir_file, parse_worktree_porcelain
from quickvibe.services.git.worktrees import main_repo_from_gitdir


class TestParseWorktreePorcelain:
    """Test parsing of `git worktree list --porcelain` output."""

    def test_main_and_linked_records(self):
        output = (
            "worktree /a/repo\nbranch refs/heads/main\n\n"
            "worktree /a/repo-feat\nbranch refs/heads/feat-x\n\n"
        )
        worktrees = parse_worktree_porcelain(output)

        assert len(worktrees) == 2
        main, linked = worktrees
        assert main.is_main is True
        assert main.branch == "main"
        assert main.main_repo_path == "/a/repo"
        assert main.git_metadata_path == os.path.join("/a/repo", ".git")
        assert linked.is_main is False
        assert linked.branch == "feat-x"
        assert linked.main_repo_path == "/a/repo"
        assert linked.git_metadata_path == os.path.join("/a/repo", ".git", "worktrees", "repo-feat")

    def test_detached_head_uses_short_sha(self):
        output = (
            "worktree /a/repo\nHEAD 0123456789abcdef\nbranch refs/heads/main\n\n"
            "worktree /a/repo-detached\nHEAD fedcba9876543210\ndetached\n"
        )
        worktrees = parse_worktree_porcelain(output)

        assert worktrees[0].branch == "main"
        assert worktrees[1].branch == "fedcba9"

    def test_branch_line_wins_over_earlier_head(self):
        output = "worktree /a/repo\nHEAD 0123456789abcdef\nbranch refs/heads/dev\n"
        assert parse_worktree_porcelain(output)[0].branch == "dev"

    def test_no_trailing_blank_line(self):
        output = "worktree /a/repo\nbranch refs/heads/main\n\nworktree /a/repo-x\nbranch refs/heads/x"
        assert [wt.path for wt in parse_worktree_porcelain(output)] == ["/a/repo", "/a/repo-x"]

    def test_empty_output(self):
        assert parse_worktree_porcelain("") == []

    def test_bare_and_prunable_lines_ignored(self):
        output = (
            "worktree /a/repo\nbranch refs/heads/main\n\n"
            "worktree /a/gone\nHEAD 0123456789abcdef\nbranch refs/heads/gone\nprunable gitdir file points to non-existent location\n\n"
        )
        worktrees = parse_worktree_porcelain(output)
        assert worktrees[1].branch == "gone"

    def test_explicit_main_repo_path(self):
        output = "worktree /a/repo\nbranch refs/heads/main\n\nworktree /b/other\nbranch refs/heads/o\n"
        linked = parse_worktree_porcelain(output, "/a/repo")[1]
        assert linked.main_repo_path == "/a/repo"
        assert linked.git_metadata_path == os.path.join("/a/repo", ".git", "worktrees", "other")


class TestParseGitdirFile:
    """Test parsing of a linked worktree's `.git` file."""

    def test_gitdir_pointer(self):
        gitdir = parse_gitdir_file("gitdir: /a/repo/.git/worktrees/feat-x\n")
        assert gitdir == "/a/repo/.git/worktrees/feat-x"
        assert main_repo_from_gitdir(gitdir) == "/a/repo"

    def test_not_a_pointer(self):
        assert parse_gitdir_file("ref: refs/heads/main") is None
        assert parse_gitdir_file("gitdir: ") is None

    def test_trailing_slash(self):
        assert main_repo_from_gitdir("/a/repo/.git/worktrees/feat-x/") == "/a/repo"


class TestIdentify:
    """Test git identity resolution of a directory."""

    def test_main_repository(self, git_repo):
        service = WorktreeService()
        info = service.identify(git_repo.working_dir)

        assert info.is_main is True
        assert info.branch == "main"
        assert info.main_repo_path == git_repo.working_dir

    def test_linked_worktree(self, git_repo_with_worktrees):
        main_path = Path(git_repo_with_worktrees.working_dir)
        service = WorktreeService()
        info = service.identify(str(main_path.parent / "project-feature-a"))

        assert info.is_main is False
        assert info.branch == "feature/a"
        assert info.main_repo_path == str(main_path)

    def test_not_a_repository(self, temp_dir):
        assert WorktreeService().identify(str(temp_dir)) is None

    def test_gitdir_file_without_git(self, temp_dir):
        """A `.git` file is enough to identify the main repo; branch degrades."""
        wt_path = temp_dir / "repo-feat"
        wt_path.mkdir()
        (wt_path / ".git").write_text(f"gitdir: {temp_dir / 'repo' / '.git' / 'worktrees' / 'repo-feat'}\n")

        info = WorktreeService().identify(str(wt_path))

        assert info.main_repo_path == str(temp_dir / "repo")
        assert info.branch == "unknown"

    def test_relative_gitdir(self, temp_dir):
        wt_path = temp_dir / "repo-feat"
        wt_path.mkdir()
        (wt_path / ".git").write_text("gitdir: ../repo/.git/worktrees/repo-feat\n")

        info = WorktreeService().identify(str(wt_path))

        assert info.main_repo_path == str(temp_dir / "repo")

    def test_garbage_git_file(self, temp_dir):
        (temp_dir / ".git").write_text("not a pointer\n")
        assert WorktreeService().identify(str(temp_dir)) is None

    def test_detached_head_branch(self, git_repo):
        git_repo.git.checkout("--detach")
        info = WorktreeService().identify(git_repo.working_dir)
        assert info.branch == git_repo.head.commit.hexsha[:7]


class TestListWorktrees:
    """Test listing worktrees through git."""

    def test_lists_main_first(self, git_repo_with_worktrees):
        main_path = git_repo_with_worktrees.working_dir
        worktrees = WorktreeService().list_worktrees(main_path)

        assert len(worktrees) == 3
        assert worktrees[0].is_main and worktrees[0].path == main_path
        assert sorted(wt.branch for wt in worktrees[1:]) == ["feature/a", "fix-b"]
        assert all(wt.main_repo_path == main_path for wt in worktrees)

    def test_not_a_repository_raises(self, temp_dir):
        with pytest.raises(WorktreeListError):
            WorktreeService().list_worktrees(str(temp_dir))


class TestCreateWorktree:
    """Test worktree creation."""

    def test_creates_sibling_directory(self, git_repo):
        service = WorktreeService()
        path = service.create_worktree(git_repo.working_dir, "feature/my-task_1")

        expected = os.path.join(os.path.dirname(git_repo.working_dir), "project-feature-my-task_1")
        assert path == expected
        assert os.path.isfile(os.path.join(path, ".git"))
        assert service.get_branch(path) == "feature/my-task_1"

    def test_from_linked_worktree_uses_main_repo(self, git_repo_with_worktrees):
        main_path = Path(git_repo_with_worktrees.working_dir)
        path = WorktreeService().create_worktree(str(main_path.parent / "project-fix-b"), "other")
        assert path == str(main_path.parent / "project-other")

    def test_invalid_branch_name(self, git_repo):
        with pytest.raises(InvalidBranchNameError):
            WorktreeService().create_worktree(git_repo.working_dir, "main")

    def test_existing_directory_refused(self, git_repo):
        (Path(git_repo.working_dir).parent / "project-taken").mkdir()
        with pytest.raises(WorktreeError, match="already exists"):
            WorktreeService().create_worktree(git_repo.working_dir, "taken")

    def test_existing_branch_reports_git_error(self, git_repo):
        git_repo.git.branch("dup")
        with pytest.raises(WorktreeError) as exc_info:
            WorktreeService().create_worktree(git_repo.working_dir, "dup")
        assert "git worktree add failed" in str(exc_info.value)

    def test_not_a_repository(self, temp_dir):
        with pytest.raises(WorktreeError):
            WorktreeService().create_worktree(str(temp_dir), "feature")


class TestRemoveWorktree:
    """Test worktree removal and prune recovery."""

    def test_remove_linked(self, git_repo_with_worktrees):
        main_path = Path(git_repo_with_worktrees.working_dir)
        wt_path = str(main_path.parent / "project-fix-b")
        service = WorktreeService()

        success, error = service.remove_worktree(wt_path)

        assert success is True
        assert error is None
        assert not os.path.exists(wt_path)
        assert len(service.list_worktrees(str(main_path))) == 2

    def test_refuses_main(self, git_repo):
        success, error = WorktreeService().remove_worktree(git_repo.working_dir)
        assert success is False
        assert "main worktree" in error

    def test_directory_already_deleted_is_pruned(self, git_repo_with_worktrees):
        main_path = Path(git_repo_with_worktrees.working_dir)
        wt_path = main_path.parent / "project-fix-b"
        shutil.rmtree(wt_path)
        service = WorktreeService()

        success, error = service.remove_worktree(str(wt_path), str(main_path))

        assert success is True, error
        assert str(wt_path) not in [wt.path for wt in service.list_worktrees(str(main_path))]

    def test_unknown_path_without_main_repo(self, temp_dir):
        success, error = WorktreeService().remove_worktree(str(temp_dir / "gone"))
        assert success is False
        assert error == "not a git worktree"

    def test_failure_after_prune_reported(self, git_repo_with_worktrees):
        main_path = Path(git_repo_with_worktrees.working_dir)
        wt_path = str(main_path.parent / "project-fix-b")
        service = WorktreeService()
        error = git.exc.GitCommandError(["git", "worktree", "remove"], 128, stderr="fatal: locked")

        with patch.object(git.Git, "worktree", create=True, side_effect=[error, ""]):
            with patch.object(service, "_is_listed", return_value=True):
                success, message = service.remove_worktree(wt_path)

        assert success is False
        assert "fatal: locked" in message


class TestGetBranch:
    """Test branch lookup."""

    def test_failure_returns_unknown(self, temp_dir):
        assert WorktreeService().get_branch(str(temp_dir)) == "unknown"
