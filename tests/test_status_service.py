"""Tests for StatusService"""
import random
import time
from unittest.mock import Mock

import pytest

from quickvibe.models.instance import ContainerStatus
from quickvibe.services.status_service import StatusService
from quickvibe.services.tmux_service import TmuxService


@pytest.fixture
def mock_tmux_service():
    service = Mock(spec=TmuxService)
    service.count_sessions.return_value = 2
    return service


class TestGetInstanceStatus:
    """Test single-instance status lookup."""

    def test_running_counts_sessions(self, mock_container_service, mock_tmux_service, make_instance):
        mock_container_service.get_status.return_value = (ContainerStatus.RUNNING, "abc123")
        service = StatusService(mock_container_service, mock_tmux_service)

        result = service.get_instance_status(make_instance())

        assert result.status == ContainerStatus.RUNNING
        assert result.container_id == "abc123"
        assert result.session_count == 2

    def test_stopped_skips_session_count(self, mock_container_service, mock_tmux_service, make_instance):
        mock_container_service.get_status.return_value = (ContainerStatus.STOPPED, "abc123")
        service = StatusService(mock_container_service, mock_tmux_service)

        result = service.get_instance_status(make_instance())

        assert result.status == ContainerStatus.STOPPED
        assert result.session_count == 0
        mock_tmux_service.count_sessions.assert_not_called()

    def test_no_container_is_unknown_with_zero_sessions(
        self, mock_container_service, mock_tmux_service, make_instance
    ):
        mock_container_service.get_status.return_value = (ContainerStatus.UNKNOWN, "")
        service = StatusService(mock_container_service, mock_tmux_service)

        result = service.get_instance_status(make_instance())

        assert result.status == ContainerStatus.UNKNOWN
        assert result.session_count == 0

    def test_queries_by_worktree_path(self, mock_container_service, mock_tmux_service, make_instance):
        mock_container_service.get_status.return_value = (ContainerStatus.UNKNOWN, "")
        instance = make_instance("/work/project-feat", "feat", is_main=False, main_repo_path="/work/project")

        StatusService(mock_container_service, mock_tmux_service).get_instance_status(instance)

        mock_container_service.get_status.assert_called_once_with("/work/project-feat")


class TestCorrelate:
    """Test the concurrent fan-out."""

    def test_empty(self, mock_container_service, mock_tmux_service):
        assert StatusService(mock_container_service, mock_tmux_service).correlate([]) == []

    def test_order_preserved_under_random_delays(
        self, mock_container_service, mock_tmux_service, make_instance
    ):
        instances = [make_instance(f"/work/p{i}") for i in range(12)]

        def slow_status(path):
            time.sleep(random.uniform(0, 0.05))
            return ContainerStatus.RUNNING, path

        mock_container_service.get_status.side_effect = slow_status
        service = StatusService(mock_container_service, mock_tmux_service)

        results = service.correlate(instances)

        assert [r.instance for r in results] == instances
        assert [r.container_id for r in results] == [i.path for i in instances]

    def test_bounded_workers(self, mock_container_service, mock_tmux_service, make_instance):
        instances = [make_instance(f"/work/p{i}") for i in range(5)]
        mock_container_service.get_status.return_value = (ContainerStatus.STOPPED, "x")
        service = StatusService(mock_container_service, mock_tmux_service, max_workers=2)

        results = service.correlate(instances)

        assert len(results) == 5
        assert all(r.status == ContainerStatus.STOPPED for r in results)

    def test_task_failure_yields_unknown(self, mock_container_service, mock_tmux_service, make_instance):
        instances = [make_instance("/work/ok"), make_instance("/work/bad")]

        def status(path):
            if path == "/work/bad":
                raise RuntimeError("unexpected")
            return ContainerStatus.RUNNING, "id"

        mock_container_service.get_status.side_effect = status
        service = StatusService(mock_container_service, mock_tmux_service)

        results = service.correlate(instances)

        assert len(results) == 2
        assert results[0].status == ContainerStatus.RUNNING
        assert results[1].status == ContainerStatus.UNKNOWN
        assert results[1].session_count == 0
        assert results[1].instance == instances[1]

    def test_every_slot_filled_when_all_tasks_fail(
        self, mock_container_service, mock_tmux_service, make_instance
    ):
        instances = [make_instance(f"/work/p{i}") for i in range(4)]
        mock_container_service.get_status.side_effect = RuntimeError("unexpected")
        service = StatusService(mock_container_service, mock_tmux_service)

        results = service.correlate(instances)

        assert len(results) == len(instances)
        assert [r.instance for r in results] == instances
        assert all(r.status == ContainerStatus.UNKNOWN for r in results)
