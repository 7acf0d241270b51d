"""Supervisor — runs every MonitorLooper and reports the first one to die.

Each looper runs in its own task. When a looper returns (its monitor has
been failing for too long) or crashes, the task puts the monitor's name on a
shared queue. :meth:`Supervisor.run` returns the first name it receives; the
caller is expected to exit the process so an external process manager can
restart it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from src.supervisor.looper import MonitorLooper

logger = structlog.stdlib.get_logger()


class Supervisor:
    """Fan-out one task per looper, fan-in on the first failure."""

    def __init__(self, loopers: Sequence[MonitorLooper]) -> None:
        if not loopers:
            raise ValueError("Supervisor needs at least one monitor")
        names = [looper.name for looper in loopers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate monitor names: {', '.join(duplicates)}")
        self._loopers = list(loopers)
        self._failed: asyncio.Queue[str] = asyncio.Queue()
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def loopers(self) -> list[MonitorLooper]:
        return list(self._loopers)

    @property
    def tasks(self) -> list[asyncio.Task[None]]:
        return list(self._tasks)

    async def run(self) -> str:
        """Start all loopers and wait for the first to die. Returns its name."""
        if not self._tasks:
            self._tasks = [
                asyncio.create_task(self._watch(looper), name=f"monitor:{looper.name}")
                for looper in self._loopers
            ]
            logger.info(
                "supervisor_started",
                monitors=[looper.name for looper in self._loopers],
            )

        name = await self._failed.get()
        logger.critical("monitor_died", monitor=name)
        return name

    async def shutdown(self) -> None:
        """Cancel any loopers still running."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    async def _watch(self, looper: MonitorLooper) -> None:
        try:
            await looper.run()
        except Exception:
            logger.exception("monitor_crashed", monitor=looper.name)
        await self._failed.put(looper.name)
