"""Monitor capability and the helpers the Cloudant monitors share."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from prometheus_client import Gauge
from pydantic import BaseModel, ValidationError

from src.monitors.exceptions import MonitorParseError


@runtime_checkable
class Monitor(Protocol):
    """One independently polled source of Cloudant metrics.

    ``retrieve()`` performs exactly one poll and updates whatever metrics the
    monitor publishes. It returns on success and raises on failure; the poll
    loop treats any ``Exception`` as a failed poll.
    """

    @property
    def name(self) -> str:
        """Stable, non-empty name used in logs and metric labels."""
        ...

    async def retrieve(self) -> None:
        """Poll the source once."""
        ...


# ── Shared helpers ──────────────────────────────────────────────

PageFetcher = Callable[..., Awaitable[dict[str, Any]]]

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], body: object, source: str) -> ModelT:
    """Validate a decoded JSON body, raising :class:`MonitorParseError` on mismatch."""
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise MonitorParseError(
            f"Unexpected {source} response: {exc.error_count()} validation error(s)"
        ) from exc


async def fetch_all_pages(
    fetch: PageFetcher,
    model: type[ModelT],
    items: Callable[[ModelT], list[Any]],
    source: str,
    page_size: int,
) -> list[ModelT]:
    """Call ``fetch(limit=, skip=)`` until every row has been read.

    Stops on a short page or once ``total_rows`` rows have been seen.
    """
    pages: list[ModelT] = []
    skip = 0
    while True:
        page = parse_model(model, await fetch(limit=page_size, skip=skip), source)
        pages.append(page)
        rows = len(items(page))
        skip += rows
        total = getattr(page, "total_rows", 0)
        if rows < page_size or (total and skip >= total):
            return pages


def replace_series(gauge: Gauge, published: set[str], values: dict[str, float]) -> set[str]:
    """Set *values* on a single-label gauge and drop labels no longer present.

    Returns the new set of published label values.
    """
    for label, value in values.items():
        gauge.labels(label).set(value)
    for stale in published - values.keys():
        try:
            gauge.remove(stale)
        except KeyError:
            pass
    return set(values)
