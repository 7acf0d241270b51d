"""Exception hierarchy for monitors."""

from __future__ import annotations


class MonitorError(Exception):
    """Base exception for all monitor errors."""


class MonitorParseError(MonitorError):
    """A Cloudant response did not have the shape the monitor expects."""
