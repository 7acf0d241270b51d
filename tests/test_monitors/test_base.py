"""Tests for the shared monitor helpers — parsing, paging, series replacement."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from prometheus_client import CollectorRegistry, Gauge

from src.core.types import SchedulerDocs
from src.monitors.base import fetch_all_pages, parse_model, replace_series
from src.monitors.exceptions import MonitorError, MonitorParseError


def _page(n: int, total: int = 0) -> dict[str, object]:
    docs = [{"database": "_replicator", "doc_id": f"d{i}", "state": "running"} for i in range(n)]
    return {"total_rows": total, "offset": 0, "docs": docs}


class TestParseModel:
    def test_valid(self) -> None:
        parsed = parse_model(SchedulerDocs, _page(2, total=2), "/_scheduler/docs")
        assert len(parsed.docs) == 2

    def test_invalid_raises_monitor_error(self) -> None:
        with pytest.raises(MonitorParseError, match="/_scheduler/docs") as exc_info:
            parse_model(SchedulerDocs, {"docs": [{}]}, "/_scheduler/docs")
        assert isinstance(exc_info.value, MonitorError)


class TestFetchAllPages:
    async def test_single_short_page(self) -> None:
        fetch = AsyncMock(return_value=_page(3, total=3))
        pages = await fetch_all_pages(fetch, SchedulerDocs, lambda p: p.docs, "docs", 10)
        assert len(pages) == 1
        fetch.assert_awaited_once_with(limit=10, skip=0)

    async def test_stops_on_short_page_without_total(self) -> None:
        fetch = AsyncMock(side_effect=[_page(2), _page(2), _page(1)])
        pages = await fetch_all_pages(fetch, SchedulerDocs, lambda p: p.docs, "docs", 2)
        assert len(pages) == 3
        assert [c.kwargs["skip"] for c in fetch.await_args_list] == [0, 2, 4]

    async def test_stops_on_empty_page(self) -> None:
        fetch = AsyncMock(side_effect=[_page(2), _page(0)])
        pages = await fetch_all_pages(fetch, SchedulerDocs, lambda p: p.docs, "docs", 2)
        assert len(pages) == 2

    async def test_stops_when_total_reached(self) -> None:
        fetch = AsyncMock(side_effect=[_page(2, total=2)])
        pages = await fetch_all_pages(fetch, SchedulerDocs, lambda p: p.docs, "docs", 2)
        assert len(pages) == 1


class TestReplaceSeries:
    def test_sets_and_removes(self) -> None:
        registry = CollectorRegistry()
        gauge = Gauge("test_series", "doc", ["key"], registry=registry)
        published = replace_series(gauge, set(), {"a": 1, "b": 2})
        assert published == {"a", "b"}
        published = replace_series(gauge, published, {"b": 5})
        assert published == {"b"}
        assert registry.get_sample_value("test_series", {"key": "a"}) is None
        assert registry.get_sample_value("test_series", {"key": "b"}) == 5

    def test_missing_stale_label_ignored(self) -> None:
        registry = CollectorRegistry()
        gauge = Gauge("test_series_missing", "doc", ["key"], registry=registry)
        assert replace_series(gauge, {"ghost"}, {}) == set()
