"""Factory that wires the enabled Cloudant monitors into poll loops."""

from __future__ import annotations

import random

import structlog

from src.cloudant.client import CloudantClient
from src.core.config import MonitorConfig, Settings
from src.monitors.active_tasks import ActiveTasksMonitor
from src.monitors.base import Monitor
from src.monitors.replication_progress import ReplicationProgressMonitor
from src.monitors.replication_status import ReplicationStatusMonitor
from src.monitors.throughput import ThroughputMonitor
from src.supervisor.failbox import FailBox
from src.supervisor.looper import MonitorLooper

logger = structlog.stdlib.get_logger()


def create_loopers(
    client: CloudantClient,
    settings: Settings,
    rng: random.Random | None = None,
) -> list[MonitorLooper]:
    """Build one :class:`MonitorLooper` per enabled monitor.

    All loopers share the supervisor's ``fail_after`` and jitter settings
    and one random generator; each gets its own :class:`FailBox`.

    Args:
        client: Connected Cloudant client shared by every monitor.
        settings: Application settings.
        rng: Random source for startup jitter. Seeded from the OS if None.
    """
    rng = rng or random.Random()
    cfg = settings.monitors
    candidates: list[tuple[MonitorConfig, Monitor]] = [
        (cfg.replication_progress, ReplicationProgressMonitor(client)),
        (cfg.replication_status, ReplicationStatusMonitor(client)),
        (cfg.throughput, ThroughputMonitor(client)),
        (cfg.active_tasks, ActiveTasksMonitor(client)),
    ]

    loopers: list[MonitorLooper] = []
    for monitor_cfg, monitor in candidates:
        if not monitor_cfg.enabled:
            logger.info("monitor_disabled", monitor=monitor.name)
            continue
        loopers.append(MonitorLooper(
            monitor,
            interval=monitor_cfg.interval_secs,
            failbox=FailBox(settings.supervisor.fail_after_secs),
            jitter_max=settings.supervisor.jitter_max_secs,
            rng=rng,
        ))
        logger.info(
            "monitor_enabled",
            monitor=monitor.name,
            interval_secs=monitor_cfg.interval_secs,
        )
    return loopers
