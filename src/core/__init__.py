"""Core module — config, types, logging, metrics."""

from src.core.config import Settings, get_settings, load_settings, reset_settings
from src.core.logging import setup_logging
from src.core.types import (
    ActiveTask,
    CapacityThroughput,
    CurrentThroughput,
    ReplicationInfo,
    ReplicationState,
    RequestClass,
    SchedulerDoc,
    SchedulerDocs,
    SchedulerJob,
    SchedulerJobs,
    ThroughputRates,
)

__all__ = [
    "ActiveTask",
    "CapacityThroughput",
    "CurrentThroughput",
    "ReplicationInfo",
    "ReplicationState",
    "RequestClass",
    "SchedulerDoc",
    "SchedulerDocs",
    "SchedulerJob",
    "SchedulerJobs",
    "Settings",
    "ThroughputRates",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
