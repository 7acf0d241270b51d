"""Prometheus metric declarations.

Every series the exporter publishes lives here so the monitors, the poll
loops and the exposition endpoint agree on one registry (the
``prometheus_client`` default).
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

# ── Exporter self-metrics (one label per monitor) ───────────────

POLLS_TOTAL = Counter(
    "cloudant_exporter_polls_total",
    "Polls attempted by each monitor, by outcome",
    ["monitor", "outcome"],  # success, failure
)
LAST_SUCCESS_TIMESTAMP = Gauge(
    "cloudant_exporter_last_success_timestamp_seconds",
    "Unix time of the most recent successful poll",
    ["monitor"],
)
CONSECUTIVE_FAILURES = Gauge(
    "cloudant_exporter_consecutive_failures",
    "Failed polls since the most recent success",
    ["monitor"],
)

# ── Replication progress (/_scheduler/jobs) ─────────────────────

REPLICATION_CHANGES_PENDING = Gauge(
    "cloudant_replication_changes_pending",
    "Changes still to be processed by the replication",
    ["docid"],
)
REPLICATION_DOCS_WRITTEN = Gauge(
    "cloudant_replication_docs_written",
    "Documents written to the replication target",
    ["docid"],
)
REPLICATION_DOC_WRITE_FAILURES = Gauge(
    "cloudant_replication_doc_write_failures",
    "Documents that failed to write to the replication target",
    ["docid"],
)
REPLICATION_DOCS_READ = Gauge(
    "cloudant_replication_docs_read",
    "Documents read from the replication source",
    ["docid"],
)

# ── Replication status (/_scheduler/docs) ───────────────────────

REPLICATION_STATUS = Gauge(
    "cloudant_replication_status",
    "Replication documents in each scheduler state",
    ["state"],
)

# ── Throughput (/_api/v2/user/...) ──────────────────────────────

CURRENT_THROUGHPUT = Gauge(
    "cloudant_current_throughput",
    "Requests per second currently used, by request class",
    ["class"],
)
CAPACITY_THROUGHPUT = Gauge(
    "cloudant_capacity_throughput",
    "Provisioned requests per second, by request class",
    ["class"],
)

# ── Active tasks (/_active_tasks) ───────────────────────────────

ACTIVE_TASKS = Gauge(
    "cloudant_active_tasks",
    "Active tasks by type",
    ["type"],
)
ACTIVE_TASKS_CHANGES_PENDING = Gauge(
    "cloudant_active_tasks_changes_pending",
    "Changes pending summed over active tasks of each type",
    ["type"],
)
