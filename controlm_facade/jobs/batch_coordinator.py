"""Batch fan-out over the execution orchestrator."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Sequence
from uuid import uuid4

from controlm_facade.store import DuplicateExecutionError

from .interfaces import (
    BATCH_ITEM_FAILED,
    BATCH_ITEM_STARTED,
    BatchCoordinatorPort,
    BatchJobItemResult,
    BatchJobRequest,
    BatchJobResult,
    JobOrchestratorPort,
    SubmissionFailedError,
)

logger = logging.getLogger(__name__)


class BatchJobCoordinator(BatchCoordinatorPort):
    """Start each batch item independently and aggregate the outcomes.

    There is no atomicity across the batch: a failed item is recorded and the
    remaining items are still started.
    """

    def __init__(
        self,
        orchestrator: JobOrchestratorPort,
        batch_id_factory: Callable[[], str] | None = None,
    ):
        if orchestrator is None:
            raise ValueError("orchestrator must not be None")
        self._orchestrator = orchestrator
        self._batch_id_factory = batch_id_factory or (lambda: str(uuid4()))

    def batch_start(self, requests: Sequence[BatchJobRequest]) -> BatchJobResult:
        """Start every request in order.

        Args:
            requests: Batch items.

        Returns:
            BatchJobResult: Per-item outcomes and batch correlation id.

        Raises:
            RuntimeError: Unexpected orchestrator failures propagate unchanged.
        """

        batch_id = self._batch_id_factory()
        item_results: list[BatchJobItemResult] = []

        for request in requests:
            try:
                start_result = self._orchestrator.job_start(
                    job_name=request.job_name,
                    execution_id=request.execution_id,
                    parameters=request.parameters,
                )
            except (SubmissionFailedError, DuplicateExecutionError, ValueError) as error:
                logger.error("Failed to start batch job: %s (batch %s): %s", request.job_name, batch_id, error)
                item_results.append(
                    BatchJobItemResult(
                        job_name=request.job_name,
                        status=BATCH_ITEM_FAILED,
                        execution_id=None,
                        error=str(error),
                    )
                )
                continue

            item_results.append(
                BatchJobItemResult(
                    job_name=start_result.job_name,
                    status=BATCH_ITEM_STARTED,
                    execution_id=start_result.execution_id,
                )
            )

        batch_result = BatchJobResult(
            batch_id=batch_id,
            items=tuple(item_results),
            created_at_utc=datetime.now(timezone.utc),
        )
        logger.info(
            "Started batch %s: %s requested, %s started, %s failed",
            batch_id,
            batch_result.requested_count,
            batch_result.started_count,
            batch_result.failed_count,
        )
        return batch_result
