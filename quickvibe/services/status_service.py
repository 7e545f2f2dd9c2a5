"""Concurrent live-status lookup for container instances"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from quickvibe.models.instance import ContainerInstance, ContainerStatus, EnrichedInstance
from quickvibe.services.container_service import ContainerService
from quickvibe.services.tmux_service import TmuxService
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


class StatusService:
    """Correlate instances with container state and tmux session counts."""

    def __init__(
        self,
        container_service: ContainerService,
        tmux_service: TmuxService,
        max_workers: Optional[int] = None,
    ):
        """Initialize the service.

        Args:
            container_service: Container status queries
            tmux_service: Session listing inside running containers
            max_workers: Bound on queries in flight (None = one thread per instance)
        """
        self.container_service = container_service
        self.tmux_service = tmux_service
        self.max_workers = max_workers

    def get_instance_status(self, instance: ContainerInstance) -> EnrichedInstance:
        """Query the status of a single instance.

        Containers are matched by the instance's own path, which is unique
        per worktree. Sessions are only counted for running containers and a
        failure to count them never changes the status.
        """
        status, container_id = self.container_service.get_status(instance.path)
        session_count = 0
        if status == ContainerStatus.RUNNING:
            session_count = self.tmux_service.count_sessions(instance.path)

        return EnrichedInstance(
            instance=instance,
            status=status,
            container_id=container_id,
            session_count=session_count,
        )

    def correlate(self, instances: Sequence[ContainerInstance]) -> List[EnrichedInstance]:
        """Query all instances in parallel.

        Returns:
            One EnrichedInstance per input, in input order
        """
        if not instances:
            return []

        # Each task writes only its own slot
        results: List[Optional[EnrichedInstance]] = [None] * len(instances)

        def query(idx: int, instance: ContainerInstance) -> None:
            results[idx] = self.get_instance_status(instance)

        max_workers = self.max_workers or len(instances)
        logger.debug(f"Querying status of {len(instances)} instances using {max_workers} workers")

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="status") as executor:
            future_to_index = {
                executor.submit(query, idx, instance): idx
                for idx, instance in enumerate(instances)
            }

            for future in as_completed(future_to_index):
                idx = future_to_index[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error(f"Error querying status of {instances[idx].path}: {e}")
                    results[idx] = EnrichedInstance(instance=instances[idx])

        return results
