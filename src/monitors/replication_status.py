"""Replication status — how many replication docs sit in each scheduler state."""

from __future__ import annotations

from collections import Counter

import structlog

from src.cloudant.client import CloudantClient
from src.core.metrics import REPLICATION_STATUS
from src.core.types import ReplicationState, SchedulerDocs
from src.monitors.base import fetch_all_pages, replace_series

logger = structlog.stdlib.get_logger()

# Docs the scheduler has not assigned a state to yet.
UNKNOWN_STATE = "unknown"


class ReplicationStatusMonitor:
    """Counts ``/_scheduler/docs`` entries by state.

    Every known :class:`ReplicationState` is always published, as zero when no
    document is in it, so alerts on e.g. ``state="failed"`` have a series to
    evaluate.
    """

    NAME = "ReplicationStatusMonitor"

    def __init__(self, client: CloudantClient, page_size: int = 1000) -> None:
        self._client = client
        self._page_size = page_size
        self._published: set[str] = set()

    @property
    def name(self) -> str:
        return self.NAME

    async def retrieve(self) -> None:
        pages = await fetch_all_pages(
            self._client.get_scheduler_docs,
            SchedulerDocs,
            lambda page: page.docs,
            "/_scheduler/docs",
            self._page_size,
        )
        counts = Counter(
            (doc.state or UNKNOWN_STATE).lower()
            for page in pages
            for doc in page.docs
        )
        values: dict[str, float] = {state.value: 0 for state in ReplicationState}
        values.update(counts)
        self._published = replace_series(REPLICATION_STATUS, self._published, values)
        logger.debug("replication_status_polled", docs=sum(counts.values()), states=dict(counts))
