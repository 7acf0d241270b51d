"""FailBox — sliding "time since last success" window for one monitor."""

from __future__ import annotations

import time
from collections.abc import Callable


class FailBox:
    """Decides when a monitor has gone too long without a successful poll.

    Until the first success, elapsed time is measured from construction, so
    a monitor that never succeeds is still eventually given up on.

    Owned by a single poll loop; not safe to share between tasks.
    """

    def __init__(self, fail_after: float, clock: Callable[[], float] = time.time) -> None:
        if fail_after <= 0:
            raise ValueError(f"fail_after must be positive, got {fail_after}")
        self._fail_after = fail_after
        self._clock = clock
        self._created_at = clock()
        self._last_success: float | None = None
        self._last_failure: float | None = None
        self._consecutive_failures = 0

    @property
    def fail_after(self) -> float:
        """Seconds a monitor may go without success."""
        return self._fail_after

    @property
    def created_at(self) -> float:
        return self._created_at

    @property
    def last_success(self) -> float | None:
        return self._last_success

    @property
    def last_failure(self) -> float | None:
        return self._last_failure

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    def success(self, now: float | None = None) -> float:
        """Record a successful poll and return the stored last-success time.

        Older timestamps never move the window back.
        """
        ts = self._clock() if now is None else now
        if self._last_success is None or ts > self._last_success:
            self._last_success = ts
        self._consecutive_failures = 0
        return self._last_success

    def failure(self, now: float | None = None) -> None:
        """Record a failed poll. Does not affect :meth:`should_exit`."""
        self._last_failure = self._clock() if now is None else now
        self._consecutive_failures += 1

    def since_success(self, now: float | None = None) -> float:
        """Seconds since the last success, or since creation if there was none."""
        ts = self._clock() if now is None else now
        reference = self._created_at if self._last_success is None else self._last_success
        return ts - reference

    def should_exit(self, now: float | None = None, fail_after: float | None = None) -> bool:
        """True once more than *fail_after* seconds have passed without success."""
        limit = self._fail_after if fail_after is None else fail_after
        return self.since_success(now) > limit
