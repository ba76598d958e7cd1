"""Typed interfaces for store-layer services.

All execution state reads and writes must go through these ports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Protocol

from controlm_facade.domain import ExecutionLogEntry, ExecutionRecord, ExecutionStatus


class DuplicateExecutionError(RuntimeError):
    """Raised when an execution id is already present in the store.

    Attributes:
        execution_id: Colliding execution id.
    """

    def __init__(self, execution_id: str):
        super().__init__(f"execution already exists: {execution_id}")
        self.execution_id = execution_id


class ExecutionNotFoundError(LookupError):
    """Raised when an execution id is unknown.

    Attributes:
        execution_id: Requested execution id.
    """

    def __init__(self, execution_id: str):
        super().__init__(f"job execution not found: {execution_id}")
        self.execution_id = execution_id


@dataclass(frozen=True)
class ExecutionUpdateResult:
    """Outcome of one atomic read-modify-write.

    Attributes:
        previous: Record observed under the lock before the mutator ran.
        current: Record stored after the mutator ran.
    """

    previous: ExecutionRecord
    current: ExecutionRecord

    @property
    def update_applied(self) -> bool:
        return self.current is not self.previous


@dataclass(frozen=True)
class ExecutionLogSnapshot:
    """Point-in-time copy of one execution log.

    Attributes:
        entries: Retained entries in append order.
        appended_count: Total entries ever appended for the execution.
        dropped_count: Oldest entries evicted by the retention limit.
    """

    entries: tuple[ExecutionLogEntry, ...]
    appended_count: int
    dropped_count: int


class ExecutionStorePort(Protocol):
    """Port definition for execution record ownership."""

    def store_create(
        self,
        execution_id: str,
        job_name: str,
        parameters: Mapping[str, Any],
        external_job_id: str | None,
        started_at_utc: datetime | None = None,
        on_created: Callable[[ExecutionRecord], None] | None = None,
    ) -> ExecutionRecord:
        """Create one RUNNING execution record.

        Args:
            execution_id: Unique execution id.
            job_name: Job name.
            parameters: Caller parameter mapping.
            external_job_id: Optional remote scheduler id.
            started_at_utc: Optional creation timestamp override.
            on_created: Optional hook run before any update can touch the new record.

        Returns:
            ExecutionRecord: Stored record.

        Raises:
            DuplicateExecutionError: Raised when the id already exists.
        """

    def store_get(self, execution_id: str) -> ExecutionRecord:
        """Return the current record for one execution.

        Raises:
            ExecutionNotFoundError: Raised when the id is unknown.
        """

    def store_contains(self, execution_id: str) -> bool:
        """Return whether the execution id is present."""

    def store_update(
        self,
        execution_id: str,
        mutator: Callable[[ExecutionRecord], ExecutionRecord],
        on_applied: Callable[[ExecutionRecord], None] | None = None,
    ) -> ExecutionUpdateResult:
        """Apply one mutation atomically with respect to other updates on the same id.

        Args:
            execution_id: Target execution id.
            mutator: Pure function returning the next record; returning the input means no change.
            on_applied: Optional hook run with the new record before it becomes visible, only when changed.

        Returns:
            ExecutionUpdateResult: Previous and current record.

        Raises:
            ExecutionNotFoundError: Raised when the id is unknown.
            ValueError: Raised when the mutation violates a record invariant.
        """

    def store_list(self, status_filter: ExecutionStatus | None = None) -> list[ExecutionRecord]:
        """Return a snapshot of records, optionally filtered by status."""

    def store_count(self) -> int:
        """Return number of stored executions."""

    def store_reset(self) -> None:
        """Drop all records."""


class ExecutionLogPort(Protocol):
    """Port definition for append-only per-execution logs."""

    def log_append(self, execution_id: str, message: str, at_utc: datetime | None = None) -> ExecutionLogEntry:
        """Append one entry to the execution log.

        Args:
            execution_id: Execution id.
            message: Log message text.
            at_utc: Optional timestamp override.

        Returns:
            ExecutionLogEntry: Appended entry.

        Raises:
            ValueError: Raised when message is blank.
        """

    def log_snapshot(self, execution_id: str) -> ExecutionLogSnapshot:
        """Return the retained entries for one execution in append order."""

    def log_reset(self) -> None:
        """Drop all log entries."""
