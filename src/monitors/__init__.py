"""Cloudant monitors — one per metric family, each polled by its own loop."""

from src.monitors.active_tasks import ActiveTasksMonitor
from src.monitors.base import Monitor
from src.monitors.exceptions import MonitorError, MonitorParseError
from src.monitors.replication_progress import ReplicationProgressMonitor
from src.monitors.replication_status import ReplicationStatusMonitor
from src.monitors.throughput import ThroughputMonitor

__all__ = [
    "ActiveTasksMonitor",
    "Monitor",
    "MonitorError",
    "MonitorParseError",
    "ReplicationProgressMonitor",
    "ReplicationStatusMonitor",
    "ThroughputMonitor",
]
