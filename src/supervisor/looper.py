"""MonitorLooper — drives one monitor on a fixed interval until it goes stale."""

from __future__ import annotations

import asyncio
import math
import random
from enum import StrEnum

import structlog

from src.core.metrics import CONSECUTIVE_FAILURES, LAST_SUCCESS_TIMESTAMP, POLLS_TOTAL
from src.monitors.base import Monitor
from src.supervisor.failbox import FailBox

logger = structlog.stdlib.get_logger()

DEFAULT_JITTER_MAX_SECS = 15.0


class LooperState(StrEnum):
    """Lifecycle of a poll loop."""

    STARTING = "starting"
    POLLING = "polling"
    EXITED = "exited"


class MonitorLooper:
    """Runs ``monitor.retrieve()`` every *interval* seconds.

    The first poll happens after a random pause in ``[0, jitter_max)`` so that
    monitors started together don't hit Cloudant at the same instant. After
    that, polls follow a fixed grid anchored at the first poll; a grid point
    that passes while a poll is still outstanding is skipped rather than
    queued, so polls for one monitor never overlap.

    Every poll outcome goes into the :class:`FailBox`. :meth:`run` returns as
    soon as the FailBox reports that the monitor has been failing for too long.

    Usage::

        looper = MonitorLooper(ThroughputMonitor(client), 5.0, FailBox(300.0))
        await looper.run()  # returns only when the monitor is dead
    """

    def __init__(
        self,
        monitor: Monitor,
        interval: float,
        failbox: FailBox,
        jitter_max: float = DEFAULT_JITTER_MAX_SECS,
        rng: random.Random | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if jitter_max < 0:
            raise ValueError(f"jitter_max must not be negative, got {jitter_max}")
        self._monitor = monitor
        self._interval = interval
        self._failbox = failbox
        self._jitter_max = jitter_max
        self._rng = rng or random.Random()
        self._state = LooperState.STARTING
        self._polls = 0

    @property
    def name(self) -> str:
        return self._monitor.name

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def failbox(self) -> FailBox:
        return self._failbox

    @property
    def state(self) -> LooperState:
        return self._state

    @property
    def polls(self) -> int:
        """Number of completed ``retrieve()`` calls."""
        return self._polls

    def startup_offset(self) -> float:
        """Random delay in ``[0, jitter_max)`` before the first poll."""
        if self._jitter_max == 0:
            return 0.0
        return self._rng.random() * self._jitter_max

    async def run(self) -> None:
        """Poll until the monitor has gone ``fail_after`` seconds without success."""
        loop = asyncio.get_running_loop()
        self._state = LooperState.STARTING

        offset = self.startup_offset()
        if offset > 0:
            await asyncio.sleep(offset)
        logger.info("monitor_startup_tick", monitor=self.name, offset_secs=round(offset, 3))

        self._state = LooperState.POLLING
        start = loop.time()
        while True:
            await self._poll_once()

            if self._failbox.should_exit():
                self._state = LooperState.EXITED
                logger.error(
                    "monitor_exiting",
                    monitor=self.name,
                    fail_after_secs=self._failbox.fail_after,
                    last_success=self._failbox.last_success,
                    consecutive_failures=self._failbox.consecutive_failures,
                )
                return

            now = loop.time()
            next_tick = start + (math.floor((now - start) / self._interval) + 1) * self._interval
            await asyncio.sleep(next_tick - now)
            logger.debug("monitor_tick", monitor=self.name, poll=self._polls + 1)

    async def _poll_once(self) -> None:
        try:
            await self._monitor.retrieve()
        except Exception as exc:
            logger.warning(
                "monitor_poll_failed",
                monitor=self.name,
                error=str(exc),
                error_type=type(exc).__name__,
                last_success=self._failbox.last_success,
            )
            self._failbox.failure()
            POLLS_TOTAL.labels(monitor=self.name, outcome="failure").inc()
        else:
            last_success = self._failbox.success()
            POLLS_TOTAL.labels(monitor=self.name, outcome="success").inc()
            LAST_SUCCESS_TIMESTAMP.labels(monitor=self.name).set(last_success)
        finally:
            self._polls += 1
        CONSECUTIVE_FAILURES.labels(monitor=self.name).set(self._failbox.consecutive_failures)
