"""Throughput — used vs. provisioned requests per second per request class."""

from __future__ import annotations

from src.cloudant.client import CloudantClient
from src.core.metrics import CAPACITY_THROUGHPUT, CURRENT_THROUGHPUT
from src.core.types import CapacityThroughput, CurrentThroughput
from src.monitors.base import parse_model


class ThroughputMonitor:
    NAME = "ThroughputMonitor"

    def __init__(self, client: CloudantClient) -> None:
        self._client = client

    @property
    def name(self) -> str:
        return self.NAME

    async def retrieve(self) -> None:
        current = parse_model(
            CurrentThroughput,
            await self._client.get_current_throughput(),
            "/_api/v2/user/current/throughput",
        )
        capacity = parse_model(
            CapacityThroughput,
            await self._client.get_capacity_throughput(),
            "/_api/v2/user/capacity/throughput",
        )

        # Publish only once both requests have succeeded.
        for cls, value in current.throughput.by_class().items():
            CURRENT_THROUGHPUT.labels(cls.value).set(value)
        for cls, value in capacity.current.throughput.by_class().items():
            CAPACITY_THROUGHPUT.labels(cls.value).set(value)
