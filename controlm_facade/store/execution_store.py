"""In-memory execution store with per-execution atomic updates."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from controlm_facade.domain import ExecutionRecord, ExecutionStatus, domain_validate_execution_invariants

from .interfaces import DuplicateExecutionError, ExecutionNotFoundError, ExecutionStorePort, ExecutionUpdateResult


class InMemoryExecutionStore(ExecutionStorePort):
    """Process-lifetime execution store.

    Each execution id owns a dedicated lock that serializes read-modify-write
    updates. The registry lock only guards dictionary membership and is never
    held while a mutator runs, so updates on different ids do not block each
    other. Hooks run under the record lock and must not update the same id:
    the create hook runs before any update can touch the new record, and the
    update hook runs before the new record is published.
    """

    def __init__(self):
        self._registry_lock = threading.Lock()
        self._records: dict[str, ExecutionRecord] = {}
        self._record_locks: dict[str, threading.Lock] = {}

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
            on_created: Optional hook run under the record lock before any update can touch the record.

        Returns:
            ExecutionRecord: Stored record.

        Raises:
            DuplicateExecutionError: Raised when the id already exists.
            ValueError: Raised when execution id or job name is blank.
        """

        normalized_execution_id = self._validate_non_empty_text(execution_id, "execution_id")
        normalized_job_name = self._validate_non_empty_text(job_name, "job_name")

        record = ExecutionRecord(
            execution_id=normalized_execution_id,
            job_name=normalized_job_name,
            status=ExecutionStatus.RUNNING,
            started_at_utc=started_at_utc or datetime.now(timezone.utc),
            ended_at_utc=None,
            parameters=parameters or {},
            external_job_id=external_job_id,
        )
        domain_validate_execution_invariants(previous=None, current=record)

        record_lock = threading.Lock()
        with record_lock:
            with self._registry_lock:
                if normalized_execution_id in self._records:
                    raise DuplicateExecutionError(normalized_execution_id)
                self._records[normalized_execution_id] = record
                self._record_locks[normalized_execution_id] = record_lock
            if on_created is not None:
                on_created(record)
        return record

    def store_get(self, execution_id: str) -> ExecutionRecord:
        with self._registry_lock:
            record = self._records.get(execution_id)
        if record is None:
            raise ExecutionNotFoundError(execution_id)
        return record

    def store_contains(self, execution_id: str) -> bool:
        with self._registry_lock:
            return execution_id in self._records

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
            on_applied: Optional hook run with the new record before it is published, only when changed.

        Returns:
            ExecutionUpdateResult: Previous and current record.

        Raises:
            ExecutionNotFoundError: Raised when the id is unknown.
            ValueError: Raised when the mutation violates a record invariant.
        """

        with self._registry_lock:
            record_lock = self._record_locks.get(execution_id)
        if record_lock is None:
            raise ExecutionNotFoundError(execution_id)

        with record_lock:
            with self._registry_lock:
                previous = self._records.get(execution_id)
            if previous is None:
                raise ExecutionNotFoundError(execution_id)

            current = mutator(previous)
            if current is previous:
                return ExecutionUpdateResult(previous=previous, current=previous)

            domain_validate_execution_invariants(previous=previous, current=current)
            if on_applied is not None:
                on_applied(current)
            with self._registry_lock:
                if execution_id not in self._records:
                    raise ExecutionNotFoundError(execution_id)
                self._records[execution_id] = current
            return ExecutionUpdateResult(previous=previous, current=current)

    def store_list(self, status_filter: ExecutionStatus | None = None) -> list[ExecutionRecord]:
        """Return a snapshot of stored records.

        Args:
            status_filter: Optional status to filter on.

        Returns:
            list[ExecutionRecord]: Records present at call time.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        with self._registry_lock:
            records = list(self._records.values())
        if status_filter is None:
            return records
        return [record for record in records if record.status is status_filter]

    def store_count(self) -> int:
        with self._registry_lock:
            return len(self._records)

    def store_reset(self) -> None:
        with self._registry_lock:
            self._records.clear()
            self._record_locks.clear()

    def _validate_non_empty_text(self, value: str, field_name: str) -> str:
        normalized_value = (value or "").strip()
        if not normalized_value:
            raise ValueError(f"{field_name} must not be blank")
        return normalized_value
