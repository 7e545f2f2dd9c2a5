"""Pytest fixtures for quickvibe tests"""
import json
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import git

from quickvibe.models.instance import ContainerInstance, Project
from quickvibe.models.worktree import WorktreeInfo


def write_devcontainer(project_path: Path, legacy: bool = False) -> Path:
    """Create a devcontainer.json for a project and return its path."""
    config_dir = project_path if legacy else project_path / ".devcontainer"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "devcontainer.json"
    config_path.write_text(json.dumps({"name": project_path.name, "image": "ubuntu"}))
    return config_path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing.

    Resolved so paths match what git reports (e.g. /private/var on macOS).
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'search_paths': [],
        'max_depth': 3,
        'excluded_dirs': ['node_modules', 'vendor'],
        'default_session_name': 'main',
        'container_timeout_seconds': 300,
        'launch_command': None,
        'workers': None,
        'github': {'max_issues': 50, 'branch_prefix': 'issue-', 'default_state': 'open'},
        'github_token': 'test_token_for_testing',
    }


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with a committed devcontainer config."""
    repo_path = temp_dir / "project"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Initial commit carries the devcontainer config, so worktrees get a copy too
    (repo_path / "README.md").write_text("# Test Project\n")
    write_devcontainer(repo_path)
    repo.index.add(["README.md", ".devcontainer/devcontainer.json"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def git_repo_with_worktrees(git_repo):
    """Create a repository with two linked worktrees next to it."""
    repo = git_repo
    main_path = Path(repo.working_dir)

    for branch in ("feature/a", "fix-b"):
        worktree_path = main_path.parent / f"project-{branch.replace('/', '-')}"
        repo.git.worktree("add", "-b", branch, str(worktree_path))

    yield repo


@pytest.fixture
def make_instance():
    """Factory for ContainerInstance objects that never touch the filesystem."""

    def _make(path="/work/project", branch="main", is_main=True, main_repo_path=None, git=True):
        name = (main_repo_path or path).rstrip("/").rsplit("/", 1)[-1]
        worktree = None
        if git:
            main_repo = main_repo_path or path
            worktree = WorktreeInfo(
                path=path,
                branch=branch,
                main_repo_path=main_repo,
                git_metadata_path=f"{main_repo}/.git" if is_main else f"{main_repo}/.git/worktrees/{path.rsplit('/', 1)[-1]}",
                is_main=is_main,
            )
        return ContainerInstance(
            project=Project(name=name, path=path),
            config_path=f"{main_repo_path or path}/.devcontainer/devcontainer.json",
            worktree=worktree,
        )

    return _make


@pytest.fixture
def mock_container_service():
    """Create a mock ContainerService."""
    from quickvibe.services.container_service import ContainerService

    service = Mock(spec=ContainerService)
    service.exec_args.side_effect = ContainerService.exec_args
    return service


@pytest.fixture
def make_devcontainer():
    """Factory writing devcontainer.json files (canonical or legacy layout)."""
    return write_devcontainer
