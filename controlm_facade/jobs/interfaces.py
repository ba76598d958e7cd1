"""Typed interfaces and result contracts for job-layer orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final, Mapping, Protocol, Sequence

from controlm_facade.domain import ExecutionLogEntry, ExecutionStatus

RECONCILIATION_NOT_REQUIRED: Final[str] = "not_required"
RECONCILIATION_UNCHANGED: Final[str] = "unchanged"
RECONCILIATION_APPLIED: Final[str] = "applied"
RECONCILIATION_SKIPPED: Final[str] = "skipped"

REMOTE_CANCEL_NOT_ATTEMPTED: Final[str] = "not_attempted"
REMOTE_CANCEL_ACKNOWLEDGED: Final[str] = "acknowledged"
REMOTE_CANCEL_FAILED: Final[str] = "failed"

BATCH_ITEM_STARTED: Final[str] = "STARTED"
BATCH_ITEM_FAILED: Final[str] = "FAILED"


class SubmissionFailedError(RuntimeError):
    """Raised when the external scheduler rejected or could not receive a submission.

    No execution record exists for the requested id after this error.

    Attributes:
        job_name: Job name that failed to submit.
        execution_id: Execution id that was requested for the submission.
    """

    def __init__(self, message: str, job_name: str, execution_id: str):
        super().__init__(message)
        self.job_name = job_name
        self.execution_id = execution_id


@dataclass(frozen=True)
class ExecutionStartResult:
    """Result contract for one accepted job start.

    Attributes:
        execution_id: Internal execution id.
        job_name: Submitted job name.
        status: Execution status after creation (always `RUNNING`).
        submitted_at_utc: Submission timestamp.
        message: Human-readable outcome message.
        external_job_id: Remote scheduler job id.
        estimated_duration: Optional remote duration estimate.
    """

    execution_id: str
    job_name: str
    status: ExecutionStatus
    submitted_at_utc: datetime
    message: str
    external_job_id: str | None
    estimated_duration: str | None


@dataclass(frozen=True)
class ExecutionStatusResult:
    """Full status projection for one execution.

    Attributes:
        execution_id: Internal execution id.
        job_name: Job name.
        status: Current status after any reconciliation round.
        started_at_utc: Creation timestamp.
        ended_at_utc: Terminal timestamp, None while running.
        duration_seconds: Elapsed whole seconds.
        duration_text: Display duration (`"12s"` or `"12s (running)"`).
        parameters: Caller parameters.
        external_job_id: Remote scheduler job id.
        reconciliation: Reconciliation outcome marker for this query.
    """

    execution_id: str
    job_name: str
    status: ExecutionStatus
    started_at_utc: datetime
    ended_at_utc: datetime | None
    duration_seconds: int
    duration_text: str
    parameters: dict[str, Any]
    external_job_id: str | None
    reconciliation: str


@dataclass(frozen=True)
class ExecutionCancellationResult:
    """Result contract for one cancel request.

    Attributes:
        execution_id: Internal execution id.
        job_name: Job name.
        status: Terminal status after the request.
        message: Human-readable outcome message.
        cancellation_applied: False when the execution was already terminal.
        remote_cancel_outcome: Remote cancel marker (`not_attempted`, `acknowledged`, `failed`).
        ended_at_utc: Terminal timestamp.
    """

    execution_id: str
    job_name: str
    status: ExecutionStatus
    message: str
    cancellation_applied: bool
    remote_cancel_outcome: str
    ended_at_utc: datetime | None


@dataclass(frozen=True)
class ExecutionCompletionResult:
    """Result contract for one manual completion request.

    Attributes:
        execution_id: Internal execution id.
        job_name: Job name.
        status: Terminal status after the request.
        completion_applied: False when the execution was already terminal.
        completed_at_utc: Terminal timestamp.
        duration_text: Display duration at completion.
        results: Caller-supplied result payload.
        message: Human-readable outcome message.
    """

    execution_id: str
    job_name: str
    status: ExecutionStatus
    completion_applied: bool
    completed_at_utc: datetime | None
    duration_text: str
    results: dict[str, Any]
    message: str


@dataclass(frozen=True)
class ExecutionSummary:
    """List projection for one execution."""

    execution_id: str
    job_name: str
    status: ExecutionStatus
    started_at_utc: datetime
    duration_seconds: int
    duration_text: str


@dataclass(frozen=True)
class ExecutionListResult:
    """Result contract for execution listing.

    Attributes:
        jobs: Summaries present at query time.
        total: Number of summaries.
        filter_label: Canonical status filter or `ALL`.
    """

    jobs: tuple[ExecutionSummary, ...]
    total: int
    filter_label: str


@dataclass(frozen=True)
class ExecutionLogsResult:
    """Result contract for execution log reads.

    Attributes:
        execution_id: Internal execution id.
        entries: Retained log entries in append order.
        log_count: Number of returned entries.
        dropped_count: Entries evicted by log retention.
    """

    execution_id: str
    entries: tuple[ExecutionLogEntry, ...]
    log_count: int
    dropped_count: int


@dataclass(frozen=True)
class BatchJobRequest:
    """One job request inside a batch.

    Attributes:
        job_name: Job name.
        parameters: Caller parameter mapping.
        execution_id: Optional caller-supplied execution id.
    """

    job_name: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    execution_id: str | None = None


@dataclass(frozen=True)
class BatchJobItemResult:
    """Per-item batch outcome.

    Attributes:
        job_name: Requested job name.
        status: `STARTED` or `FAILED`.
        execution_id: Created execution id, None when the item failed.
        error: Failure message, None when the item started.
    """

    job_name: str
    status: str
    execution_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class BatchJobResult:
    """Aggregate batch outcome.

    Attributes:
        batch_id: Batch correlation id.
        items: Per-item outcomes in request order.
        created_at_utc: Batch completion timestamp.
    """

    batch_id: str
    items: tuple[BatchJobItemResult, ...]
    created_at_utc: datetime

    @property
    def requested_count(self) -> int:
        return len(self.items)

    @property
    def started_count(self) -> int:
        return sum(1 for item in self.items if item.status == BATCH_ITEM_STARTED)

    @property
    def failed_count(self) -> int:
        return sum(1 for item in self.items if item.status == BATCH_ITEM_FAILED)


class JobOrchestratorPort(Protocol):
    """Port definition for execution lifecycle operations."""

    def job_start(
        self,
        job_name: str,
        execution_id: str | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> ExecutionStartResult:
        """Submit one job and create its RUNNING execution record.

        Raises:
            DuplicateExecutionError: Raised when the execution id already exists.
            SubmissionFailedError: Raised when remote submission failed; no record is created.
            ValueError: Raised when job name is blank.
        """

    def job_get_status(self, execution_id: str) -> ExecutionStatusResult:
        """Return status after at most one reconciliation round.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """

    def job_cancel(self, execution_id: str) -> ExecutionCancellationResult:
        """Cancel one execution locally and best-effort remotely.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """

    def job_complete(
        self,
        execution_id: str,
        status: str | ExecutionStatus,
        results: Mapping[str, Any] | None = None,
    ) -> ExecutionCompletionResult:
        """Manually move one execution to a terminal status.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
            ValueError: Raised when status is not terminal.
        """

    def job_list(self, status_filter: str | ExecutionStatus | None = None) -> ExecutionListResult:
        """Return summaries without reconciliation.

        Raises:
            ValueError: Raised when the status filter is unknown.
        """

    def job_get_logs(self, execution_id: str) -> ExecutionLogsResult:
        """Return execution log entries in append order.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """


class BatchCoordinatorPort(Protocol):
    """Port definition for batch fan-out."""

    def batch_start(self, requests: Sequence[BatchJobRequest]) -> BatchJobResult:
        """Start every request and aggregate per-item outcomes."""
