"""Execution lifecycle state machine and derived duration helpers."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from .models import ExecutionRecord, ExecutionStatus


def domain_execution_transition(
    record: ExecutionRecord,
    target_status: ExecutionStatus,
    at_utc: datetime,
) -> ExecutionRecord:
    """Apply one forward lifecycle transition.

    Terminal records are returned unchanged, so a late cancel or reconciliation
    can never overwrite an earlier terminal outcome.

    Args:
        record: Current execution record.
        target_status: Requested terminal status.
        at_utc: Transition timestamp recorded as `ended_at_utc`.

    Returns:
        ExecutionRecord: Transitioned record, or the same instance when already terminal.

    Raises:
        ValueError: Raised when the target status is not terminal.
    """

    if not target_status.is_terminal:
        raise ValueError(f"transition target must be terminal, got {target_status.value}")
    if record.is_terminal:
        return record
    return replace(record, status=target_status, ended_at_utc=at_utc)


def domain_validate_execution_invariants(previous: ExecutionRecord | None, current: ExecutionRecord) -> None:
    """Validate record invariants for a create or update.

    Args:
        previous: Record before the mutation, or None for creation.
        current: Record after the mutation.

    Returns:
        None: Validation is performed for side effects only.

    Raises:
        ValueError: Raised when the mutation breaks an execution invariant.
    """

    if current.is_terminal != (current.ended_at_utc is not None):
        raise ValueError(
            f"ended_at_utc must be set if and only if status is terminal (status={current.status.value})"
        )
    if previous is None:
        if current.status is not ExecutionStatus.RUNNING:
            raise ValueError("new executions must start in RUNNING")
        return

    if current.execution_id != previous.execution_id:
        raise ValueError("execution_id is immutable")
    if (
        current.job_name != previous.job_name
        or current.started_at_utc != previous.started_at_utc
        or current.external_job_id != previous.external_job_id
        or dict(current.parameters) != dict(previous.parameters)
    ):
        raise ValueError(f"immutable execution fields changed for execution_id={current.execution_id}")
    if previous.is_terminal and current is not previous:
        if current.status is not previous.status or current.ended_at_utc != previous.ended_at_utc:
            raise ValueError(f"terminal execution cannot transition (execution_id={current.execution_id})")


def domain_execution_duration_seconds(record: ExecutionRecord, now_utc: datetime | None = None) -> int:
    """Return whole elapsed seconds for the execution.

    Running executions are measured against `now_utc`; terminal ones against
    their fixed `ended_at_utc`.
    """

    end_at = record.ended_at_utc or now_utc or datetime.now(timezone.utc)
    return max(0, int((end_at - record.started_at_utc).total_seconds()))


def domain_execution_duration_text(record: ExecutionRecord, now_utc: datetime | None = None) -> str:
    duration_seconds = domain_execution_duration_seconds(record, now_utc=now_utc)
    if record.is_terminal:
        return f"{duration_seconds}s"
    return f"{duration_seconds}s (running)"
