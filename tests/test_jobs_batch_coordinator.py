"""Regression tests for batch fan-out over the execution orchestrator."""
# pylint: disable=duplicate-code

from __future__ import annotations

from typing import Any, Mapping

import pytest

from controlm_facade.adapters import MockControlMScheduler, SchedulerConnectionError, SchedulerSubmitResult
from controlm_facade.domain import ExecutionStatus
from controlm_facade.jobs import (
    BATCH_ITEM_FAILED,
    BATCH_ITEM_STARTED,
    BatchJobCoordinator,
    BatchJobRequest,
    ControlMJobOrchestrator,
)
from controlm_facade.store import InMemoryExecutionLog, InMemoryExecutionStore


class _SelectiveFailingScheduler(MockControlMScheduler):
    """Mock scheduler that rejects submissions for configured job names."""

    def __init__(self, failing_job_names: set[str]):
        """Initialize scheduler with failing job names.

        Args:
            failing_job_names: Job names whose submission raises.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        super().__init__()
        self._failing_job_names = failing_job_names

    def adapter_submit_job(self, job_name: str, parameters: Mapping[str, Any]) -> SchedulerSubmitResult:
        if job_name in self._failing_job_names:
            raise SchedulerConnectionError("Control-M request failed: connection refused")
        return super().adapter_submit_job(job_name, parameters)


def _build_coordinator(
    failing_job_names: set[str] | None = None,
) -> tuple[BatchJobCoordinator, InMemoryExecutionStore]:
    """Build batch coordinator wired to in-memory orchestrator dependencies.

    Args:
        failing_job_names: Optional job names whose submission fails.

    Returns:
        tuple[BatchJobCoordinator, InMemoryExecutionStore]: Coordinator and backing store.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    execution_store = InMemoryExecutionStore()
    orchestrator = ControlMJobOrchestrator(
        execution_store=execution_store,
        execution_log=InMemoryExecutionLog(),
        scheduler_client=_SelectiveFailingScheduler(failing_job_names or set()),
    )
    coordinator = BatchJobCoordinator(orchestrator=orchestrator, batch_id_factory=lambda: "batch-1")
    return coordinator, execution_store


def test_jobs_batch_partial_failure_keeps_other_items() -> None:
    """Start surviving items when one submission fails.

    Returns:
        None: Assertions validate partial batch behavior.

    Raises:
        AssertionError: Raised when batch aggregation is incorrect.
    """

    coordinator, execution_store = _build_coordinator(failing_job_names={"dataLoad"})

    batch_result = coordinator.batch_start(
        [
            BatchJobRequest(job_name="dataExtract", parameters={"source": "crm"}),
            BatchJobRequest(job_name="dataLoad"),
            BatchJobRequest(job_name="dataTransform"),
        ]
    )

    assert batch_result.batch_id == "batch-1"
    assert batch_result.requested_count == 3
    assert batch_result.started_count == 2
    assert batch_result.failed_count == 1
    assert [item.status for item in batch_result.items] == [BATCH_ITEM_STARTED, BATCH_ITEM_FAILED, BATCH_ITEM_STARTED]
    assert batch_result.items[1].execution_id is None
    assert "connection refused" in (batch_result.items[1].error or "")
    assert execution_store.store_count() == 2
    for item in (batch_result.items[0], batch_result.items[2]):
        assert execution_store.store_get(item.execution_id or "").status is ExecutionStatus.RUNNING


def test_jobs_batch_duplicate_ids_fail_only_repeated_item() -> None:
    coordinator, execution_store = _build_coordinator()

    batch_result = coordinator.batch_start(
        [
            BatchJobRequest(job_name="quickTest", execution_id="batch-dup"),
            BatchJobRequest(job_name="quickTest", execution_id="batch-dup"),
        ]
    )

    assert batch_result.started_count == 1
    assert batch_result.failed_count == 1
    assert batch_result.items[0].execution_id == "batch-dup"
    assert "already exists" in (batch_result.items[1].error or "")
    assert execution_store.store_count() == 1


def test_jobs_batch_empty_request_returns_empty_result() -> None:
    coordinator, execution_store = _build_coordinator()

    batch_result = coordinator.batch_start([])

    assert batch_result.requested_count == 0
    assert batch_result.items == ()
    assert execution_store.store_count() == 0


def test_jobs_batch_rejects_missing_orchestrator() -> None:
    with pytest.raises(ValueError, match="orchestrator"):
        BatchJobCoordinator(orchestrator=None)  # type: ignore[arg-type]
