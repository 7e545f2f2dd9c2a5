"""Tests for data models"""
from quickvibe.models.instance import ContainerStatus, EnrichedInstance
from quickvibe.models.issue import Issue


class TestContainerInstance:
    """Test naming of instances."""

    def test_main_worktree_display_name(self, make_instance):
        instance = make_instance("/work/project", "main")
        assert instance.display_name == "project"
        assert instance.is_worktree is False

    def test_linked_worktree_display_name(self, make_instance):
        instance = make_instance(
            "/work/project-feat", "feat", is_main=False, main_repo_path="/work/project"
        )
        assert instance.name == "project"
        assert instance.display_name == "project [feat]"
        assert instance.is_worktree is True
        assert instance.worktree.git_metadata_path == "/work/project/.git/worktrees/project-feat"

    def test_non_git(self, make_instance):
        instance = make_instance("/work/plain", git=False)
        assert instance.branch is None
        assert instance.display_name == "plain"


class TestEnrichedInstance:
    def test_defaults(self, make_instance):
        item = EnrichedInstance(make_instance())
        assert item.status == ContainerStatus.UNKNOWN
        assert item.session_count == 0
        assert item.is_running is False


class TestIssue:
    def test_str(self):
        assert str(Issue(7, "Fix it", "open", "u")) == "#7 Fix it"
