"""
Data models for the combined status check.

Raw records are parsed from the GitHub REST payloads with pydantic. The
per-tick results are frozen dataclasses so a snapshot can't change once the
orchestrator starts deciding on it.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict


class CheckState(str, Enum):
    """Derived lifecycle state of a single status or check-run."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PollOutcome(str, Enum):
    """Terminal outcome of the polling loop."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class StatusRecord(BaseModel):
    """A commit status as reported by the combined status endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    context: str
    state: str


class CheckRunRecord(BaseModel):
    """A check-run as reported by the checks endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    status: str
    conclusion: str | None = None


@dataclass(frozen=True)
class StatusPartition:
    """Matching statuses split into pending and completed."""

    pending: tuple[StatusRecord, ...] = ()
    completed: tuple[StatusRecord, ...] = ()
    total_seen: int = 0

    @property
    def kept(self) -> int:
        """Number of statuses that matched the name filter."""
        return len(self.pending) + len(self.completed)


@dataclass(frozen=True)
class CheckRunPartition:
    """Matching check-runs split into pending and completed."""

    pending: tuple[CheckRunRecord, ...] = ()
    completed: tuple[CheckRunRecord, ...] = ()
    total_seen: int = 0

    @property
    def kept(self) -> int:
        """Number of check-runs that matched the name filter."""
        return len(self.pending) + len(self.completed)


@dataclass(frozen=True)
class TickSnapshot:
    """Result of one polling tick across both sources."""

    statuses: StatusPartition = field(default_factory=StatusPartition)
    check_runs: CheckRunPartition = field(default_factory=CheckRunPartition)

    @property
    def has_pending(self) -> bool:
        return bool(self.statuses.pending or self.check_runs.pending)


@dataclass(frozen=True)
class PollResult:
    """Terminal result reported by the orchestrator."""

    outcome: PollOutcome
    failed_statuses: tuple[str, ...] = ()
    failed_check_runs: tuple[str, ...] = ()
    elapsed_seconds: int = 0
    ticks: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome is PollOutcome.SUCCESS
