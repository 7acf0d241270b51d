"""Tests for the exporter's Prometheus metric declarations."""

from __future__ import annotations

from prometheus_client import REGISTRY

import src.core.metrics  # noqa: F401


def _families(kind: str) -> list[str]:
    return [
        family.name
        for family in REGISTRY.collect()
        if family.name.startswith("cloudant_") and family.type == kind
    ]


class TestMetricNames:
    def test_gauges_have_no_counter_suffix(self) -> None:
        gauges = _families("gauge")
        assert "cloudant_replication_docs_written" in gauges
        assert [name for name in gauges if name.endswith("_total")] == []

    def test_polls_counter_exposed_with_total(self) -> None:
        assert "cloudant_exporter_polls" in _families("counter")
