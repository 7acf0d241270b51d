"""Supervision core — failure windows, poll loops, fan-in shutdown."""

from src.supervisor.factory import create_loopers
from src.supervisor.failbox import FailBox
from src.supervisor.looper import LooperState, MonitorLooper
from src.supervisor.supervisor import Supervisor

__all__ = [
    "FailBox",
    "LooperState",
    "MonitorLooper",
    "Supervisor",
    "create_loopers",
]
