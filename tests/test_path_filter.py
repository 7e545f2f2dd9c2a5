"""Tests for PathFilter"""
import os

import pytest

from quickvibe.services.discovery import PathFilter


class TestShouldDescend:
    """Test the directory/file predicate."""

    def setup_method(self):
        self.path_filter = PathFilter(max_depth=3, excluded_dirs=["node_modules", "vendor"])

    def test_hidden_directory_skipped(self):
        assert self.path_filter.should_descend(".git", True, 0) is False
        assert self.path_filter.should_descend(".cache", True, 1) is False

    def test_devcontainer_directory_allowed(self):
        assert self.path_filter.should_descend(".devcontainer", True, 1) is True

    def test_excluded_directory_skipped(self):
        assert self.path_filter.should_descend("node_modules", True, 0) is False
        assert self.path_filter.should_descend("vendor", True, 2) is False

    def test_hidden_and_excluded_only_apply_to_directories(self):
        """Files are only subject to the depth rule."""
        assert self.path_filter.should_descend(".envrc", False, 0) is True
        assert self.path_filter.should_descend("vendor", False, 0) is True

    def test_depth_limit(self):
        assert self.path_filter.should_descend("src", True, 3) is True
        assert self.path_filter.should_descend("src", True, 4) is False
        assert self.path_filter.should_descend("devcontainer.json", False, 4) is False

    def test_zero_depth_only_allows_direct_children(self):
        path_filter = PathFilter(max_depth=0)
        assert path_filter.should_descend("project", True, 0) is True
        assert path_filter.should_descend("project", True, 1) is False

    def test_negative_depth_rejected(self):
        with pytest.raises(ValueError):
            PathFilter(max_depth=-1)


class TestDepthOf:
    """Test separator-count depth."""

    def test_root_itself(self):
        assert PathFilter.depth_of("/work", "/work") == 0

    def test_direct_child(self):
        assert PathFilter.depth_of("/work", "/work/project") == 0

    def test_nested(self):
        path = os.path.join("/work", "project", ".devcontainer", "devcontainer.json")
        assert PathFilter.depth_of("/work", path) == 2
