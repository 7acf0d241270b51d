"""Tests for create_loopers — wiring enabled monitors into poll loops."""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

from src.core.config import (
    MonitorConfig,
    MonitorsConfig,
    ReplicationStatusConfig,
    Settings,
    SupervisorConfig,
)
from src.monitors.active_tasks import ActiveTasksMonitor
from src.monitors.replication_progress import ReplicationProgressMonitor
from src.monitors.replication_status import ReplicationStatusMonitor
from src.monitors.throughput import ThroughputMonitor
from src.supervisor.factory import create_loopers


class TestCreateLoopers:
    def test_all_monitors_enabled_by_default(self) -> None:
        loopers = create_loopers(AsyncMock(), Settings())
        assert [lp.name for lp in loopers] == [
            ReplicationProgressMonitor.NAME,
            ReplicationStatusMonitor.NAME,
            ThroughputMonitor.NAME,
            ActiveTasksMonitor.NAME,
        ]

    def test_default_intervals(self) -> None:
        loopers = {lp.name: lp for lp in create_loopers(AsyncMock(), Settings())}
        assert loopers[ReplicationProgressMonitor.NAME].interval == 5.0
        assert loopers[ReplicationStatusMonitor.NAME].interval == 600.0
        assert loopers[ThroughputMonitor.NAME].interval == 5.0
        assert loopers[ActiveTasksMonitor.NAME].interval == 5.0

    def test_disabled_monitor_skipped(self) -> None:
        settings = Settings(monitors=MonitorsConfig(
            throughput=MonitorConfig(enabled=False),
        ))
        names = [lp.name for lp in create_loopers(AsyncMock(), settings)]
        assert ThroughputMonitor.NAME not in names
        assert len(names) == 3

    def test_supervisor_settings_applied(self) -> None:
        settings = Settings(supervisor=SupervisorConfig(fail_after_secs=42.0, jitter_max_secs=0))
        loopers = create_loopers(AsyncMock(), settings, rng=random.Random(1))
        assert all(lp.failbox.fail_after == 42.0 for lp in loopers)
        assert all(lp.startup_offset() == 0.0 for lp in loopers)

    def test_each_looper_gets_its_own_failbox(self) -> None:
        loopers = create_loopers(AsyncMock(), Settings())
        assert len({id(lp.failbox) for lp in loopers}) == len(loopers)

    def test_none_enabled(self) -> None:
        off = MonitorConfig(enabled=False)
        settings = Settings(monitors=MonitorsConfig(
            replication_progress=off,
            replication_status=ReplicationStatusConfig(enabled=False),
            throughput=off,
            active_tasks=off,
        ))
        assert create_loopers(AsyncMock(), settings) == []
