"""Domain types for Cloudant responses consumed by the monitors."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ReplicationState(StrEnum):
    """Scheduler states a replication document can be in."""

    INITIALIZING = "initializing"
    RUNNING = "running"
    PENDING = "pending"
    CRASHING = "crashing"
    ERROR = "error"
    FAILED = "failed"
    COMPLETED = "completed"


class RequestClass(StrEnum):
    """Cloudant throughput request classes."""

    READ = "read"
    WRITE = "write"
    QUERY = "query"


class ReplicationInfo(BaseModel):
    """Progress counters reported for a running replication job."""

    model_config = ConfigDict(extra="ignore")

    changes_pending: int | None = None
    docs_written: int = 0
    doc_write_failures: int = 0
    docs_read: int = 0


class SchedulerJob(BaseModel):
    """One entry of ``GET /_scheduler/jobs``."""

    model_config = ConfigDict(extra="ignore")

    id: str
    database: str | None = None
    doc_id: str | None = None
    info: ReplicationInfo | None = None

    @property
    def label(self) -> str:
        """Stable identifier for metric labels (the replication doc id when set)."""
        return self.doc_id or self.id


class SchedulerJobs(BaseModel):
    """Body of ``GET /_scheduler/jobs``."""

    model_config = ConfigDict(extra="ignore")

    total_rows: int = 0
    offset: int = 0
    jobs: list[SchedulerJob] = Field(default_factory=list)


class SchedulerDoc(BaseModel):
    """One entry of ``GET /_scheduler/docs``."""

    model_config = ConfigDict(extra="ignore")

    database: str
    doc_id: str
    state: str | None = None


class SchedulerDocs(BaseModel):
    """Body of ``GET /_scheduler/docs``."""

    model_config = ConfigDict(extra="ignore")

    total_rows: int = 0
    offset: int = 0
    docs: list[SchedulerDoc] = Field(default_factory=list)


class ThroughputRates(BaseModel):
    """Requests per second for each request class."""

    model_config = ConfigDict(extra="ignore")

    read: float = 0.0
    write: float = 0.0
    query: float = 0.0

    def by_class(self) -> dict[RequestClass, float]:
        return {
            RequestClass.READ: self.read,
            RequestClass.WRITE: self.write,
            RequestClass.QUERY: self.query,
        }


class CurrentThroughput(BaseModel):
    """Body of ``GET /_api/v2/user/current/throughput``."""

    model_config = ConfigDict(extra="ignore")

    throughput: ThroughputRates


class CapacityTarget(BaseModel):
    model_config = ConfigDict(extra="ignore")

    throughput: ThroughputRates


class CapacityThroughput(BaseModel):
    """Body of ``GET /_api/v2/user/capacity/throughput``."""

    model_config = ConfigDict(extra="ignore")

    current: CapacityTarget
    target: CapacityTarget | None = None


class ActiveTask(BaseModel):
    """One entry of ``GET /_active_tasks``."""

    model_config = ConfigDict(extra="ignore")

    type: str
    node: str | None = None
    database: str | None = None
    changes_pending: int | None = None
