"""Active tasks — running indexers, compactions and replications by type."""

from __future__ import annotations

from collections import defaultdict

import structlog

from src.cloudant.client import CloudantClient
from src.core.metrics import ACTIVE_TASKS, ACTIVE_TASKS_CHANGES_PENDING
from src.core.types import ActiveTask
from src.monitors.base import parse_model, replace_series

logger = structlog.stdlib.get_logger()

# Always published (as zero when idle).
KNOWN_TASK_TYPES: tuple[str, ...] = (
    "database_compaction",
    "indexer",
    "replication",
    "search_indexer",
    "view_compaction",
)


class ActiveTasksMonitor:
    """Publishes task counts and summed ``changes_pending`` per task type."""

    NAME = "ActiveTasksMonitor"

    def __init__(self, client: CloudantClient) -> None:
        self._client = client
        self._counts: set[str] = set()
        self._pending: set[str] = set()

    @property
    def name(self) -> str:
        return self.NAME

    async def retrieve(self) -> None:
        raw = await self._client.get_active_tasks()
        tasks = [parse_model(ActiveTask, entry, "/_active_tasks") for entry in raw]

        counts: dict[str, float] = {t: 0 for t in KNOWN_TASK_TYPES}
        pending: dict[str, float] = defaultdict(float)
        for task in tasks:
            counts[task.type] = counts.get(task.type, 0) + 1
            if task.changes_pending is not None:
                pending[task.type] += task.changes_pending

        self._counts = replace_series(ACTIVE_TASKS, self._counts, counts)
        self._pending = replace_series(ACTIVE_TASKS_CHANGES_PENDING, self._pending, dict(pending))
        logger.debug("active_tasks_polled", tasks=len(tasks))
