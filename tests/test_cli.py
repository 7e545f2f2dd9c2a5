"""Tests for the command-line entry point"""
import sys
from unittest.mock import patch

import pytest
from rich.console import Console

from quickvibe.cli import main, parse_args
from quickvibe.cli.main import build_config
from quickvibe.models.instance import ContainerStatus


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, temp_dir):
    """Keep the user's real config and log out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.setenv("QUICKVIBE_LOG_DIR", str(temp_dir / "logs"))
    # Wide enough that table cells never wrap
    monkeypatch.setattr(sys.modules["quickvibe.cli.main"], "console", Console(width=200))


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.search_paths is None
        assert args.max_depth is None
        assert args.list is False

    def test_repeatable_search_path(self):
        args = parse_args(["--search-path", "/a", "--search-path", "/b", "--max-depth", "2"])
        assert args.search_paths == ["/a", "/b"]
        assert args.max_depth == 2


class TestBuildConfig:
    def test_overrides(self, temp_dir):
        config = build_config(parse_args(["--search-path", str(temp_dir), "--workers", "4", "-v"]))
        assert config.search_paths == [str(temp_dir)]
        assert config.workers == 4
        assert config.verbose is True

    def test_token_survives_masking(self, temp_dir):
        config_dir = temp_dir / "config" / "quickvibe"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("github_token: secret\n")

        assert build_config(parse_args([])).github_token == "secret"


class TestMain:
    def test_list_prints_table(self, temp_dir, git_repo_with_worktrees, capsys):
        with patch(
            "quickvibe.services.container_service.ContainerService.get_status",
            return_value=(ContainerStatus.UNKNOWN, ""),
        ):
            exit_code = main(["--list", "--search-path", str(temp_dir)])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "project [feature/a]" in out
        assert "Total: 3" in out

    def test_list_nothing_found(self, temp_dir, capsys):
        assert main(["--list", "--search-path", str(temp_dir)]) == 0
        assert "No devcontainer projects found" in capsys.readouterr().out

    def test_show_config(self, capsys):
        assert main(["--show-config"]) == 0
        assert "Max Depth" in capsys.readouterr().out

    def test_bad_config_file(self, temp_dir, capsys):
        path = temp_dir / "bad.yaml"
        path.write_text("max_depth: [\n")
        assert main(["--list", "--config", str(path)]) == 1
        assert "Invalid configuration" in capsys.readouterr().out
