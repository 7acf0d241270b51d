"""Replication progress — per-replication counters from ``/_scheduler/jobs``."""

from __future__ import annotations

import structlog

from src.cloudant.client import CloudantClient
from src.core.metrics import (
    REPLICATION_CHANGES_PENDING,
    REPLICATION_DOC_WRITE_FAILURES,
    REPLICATION_DOCS_READ,
    REPLICATION_DOCS_WRITTEN,
)
from src.core.types import SchedulerJob, SchedulerJobs
from src.monitors.base import fetch_all_pages, replace_series

logger = structlog.stdlib.get_logger()


class ReplicationProgressMonitor:
    """Publishes changes pending and document counts for each running replication.

    Jobs without an ``info`` block (not yet checkpointed) are skipped, and
    ``changes_pending`` is only published once the scheduler reports it.
    """

    NAME = "ReplicationProgressMonitor"

    def __init__(self, client: CloudantClient, page_size: int = 1000) -> None:
        self._client = client
        self._page_size = page_size
        self._pending: set[str] = set()
        self._written: set[str] = set()
        self._failures: set[str] = set()
        self._read: set[str] = set()

    @property
    def name(self) -> str:
        return self.NAME

    async def retrieve(self) -> None:
        pages = await fetch_all_pages(
            self._client.get_scheduler_jobs,
            SchedulerJobs,
            lambda page: page.jobs,
            "/_scheduler/jobs",
            self._page_size,
        )
        jobs = [job for page in pages for job in page.jobs]
        self._publish(jobs)
        logger.debug("replication_progress_polled", jobs=len(jobs))

    def _publish(self, jobs: list[SchedulerJob]) -> None:
        pending: dict[str, float] = {}
        written: dict[str, float] = {}
        failures: dict[str, float] = {}
        read: dict[str, float] = {}
        for job in jobs:
            if job.info is None:
                continue
            label = job.label
            if job.info.changes_pending is not None:
                pending[label] = job.info.changes_pending
            written[label] = job.info.docs_written
            failures[label] = job.info.doc_write_failures
            read[label] = job.info.docs_read

        self._pending = replace_series(REPLICATION_CHANGES_PENDING, self._pending, pending)
        self._written = replace_series(REPLICATION_DOCS_WRITTEN, self._written, written)
        self._failures = replace_series(REPLICATION_DOC_WRITE_FAILURES, self._failures, failures)
        self._read = replace_series(REPLICATION_DOCS_READ, self._read, read)
