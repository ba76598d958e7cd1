"""Regression tests for append-only execution log retention."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from controlm_facade.store import InMemoryExecutionLog


def test_store_log_preserves_append_order_per_execution() -> None:
    """Return entries in append order and keep executions separate.

    Returns:
        None: Assertions validate ordering and isolation.

    Raises:
        AssertionError: Raised when ordering or isolation is incorrect.
    """

    execution_log = InMemoryExecutionLog()
    execution_log.log_append("exec-1", "first")
    execution_log.log_append("exec-2", "other execution")
    execution_log.log_append("exec-1", "second")

    snapshot = execution_log.log_snapshot("exec-1")

    assert [entry.message for entry in snapshot.entries] == ["first", "second"]
    assert snapshot.appended_count == 2
    assert snapshot.dropped_count == 0
    assert execution_log.log_snapshot("exec-2").appended_count == 1


def test_store_log_snapshot_is_not_affected_by_later_appends() -> None:
    execution_log = InMemoryExecutionLog()
    execution_log.log_append("exec-1", "first")
    snapshot = execution_log.log_snapshot("exec-1")

    execution_log.log_append("exec-1", "second")

    assert len(snapshot.entries) == 1
    assert len(execution_log.log_snapshot("exec-1").entries) == 2


def test_store_log_retention_evicts_oldest_and_counts_dropped() -> None:
    """Evict the oldest entries once the retention limit is reached.

    Returns:
        None: Assertions validate ring-buffer retention.

    Raises:
        AssertionError: Raised when retention is incorrect.
    """

    execution_log = InMemoryExecutionLog(max_entries=3)
    for index in range(5):
        execution_log.log_append("exec-1", f"line {index}")

    snapshot = execution_log.log_snapshot("exec-1")

    assert [entry.message for entry in snapshot.entries] == ["line 2", "line 3", "line 4"]
    assert snapshot.appended_count == 5
    assert snapshot.dropped_count == 2


def test_store_log_entry_format_line_uses_iso_timestamp() -> None:
    execution_log = InMemoryExecutionLog()
    entry = execution_log.log_append(
        "exec-1",
        "Job submitted",
        at_utc=datetime(2025, 1, 15, 14, 0, tzinfo=timezone.utc),
    )

    assert entry.entry_format_line() == "2025-01-15T14:00:00+00:00: Job submitted"


def test_store_log_rejects_blank_message_and_invalid_limit() -> None:
    with pytest.raises(ValueError, match="message"):
        InMemoryExecutionLog().log_append("exec-1", "   ")
    with pytest.raises(ValueError, match="max_entries"):
        InMemoryExecutionLog(max_entries=0)


def test_store_log_unknown_execution_returns_empty_snapshot_and_reset_clears() -> None:
    execution_log = InMemoryExecutionLog()
    assert execution_log.log_snapshot("missing").entries == ()

    execution_log.log_append("exec-1", "first")
    execution_log.log_reset()

    assert execution_log.log_snapshot("exec-1").appended_count == 0
