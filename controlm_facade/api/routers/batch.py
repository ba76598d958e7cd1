"""Batch API router for multi-job start requests."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from controlm_facade.jobs import BatchCoordinatorPort, BatchJobRequest, BatchJobResult


class BatchJobRequestPayload(BaseModel):
    """Request body item for one batch job.

    Attributes:
        job_name: Job name to submit.
        parameters: Optional parameter mapping.
        job_id: Optional caller-supplied execution id.
    """

    job_name: str = Field(min_length=1)
    parameters: dict[str, Any] = Field(default_factory=dict)
    job_id: str | None = None


def api_create_batch_router(batch_coordinator: BatchCoordinatorPort) -> APIRouter:
    """Create batch router.

    Args:
        batch_coordinator: Coordinator that fans batch items out to the orchestrator.

    Returns:
        APIRouter: Router exposing `/control-m/batch/start`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if batch_coordinator is None:
        raise ValueError("batch_coordinator must not be None")

    router = APIRouter(prefix="/control-m/batch", tags=["batch"])

    @router.post("/start")
    def api_batch_start(job_requests: list[BatchJobRequestPayload] = Body()) -> JSONResponse:
        """Start every job in the request body.

        Args:
            job_requests: Batch items in submission order.

        Returns:
            JSONResponse: Per-item outcomes and batch id; partial success still returns 200.

        Raises:
            RuntimeError: Raised when batch execution fails unexpectedly.
        """

        batch_result = batch_coordinator.batch_start(
            [
                BatchJobRequest(
                    job_name=job_request.job_name,
                    parameters=job_request.parameters,
                    execution_id=job_request.job_id,
                )
                for job_request in job_requests
            ]
        )
        return JSONResponse(content=api_serialize_batch_result(batch_result), status_code=status.HTTP_200_OK)

    return router


def api_serialize_batch_result(batch_result: BatchJobResult) -> dict[str, object]:
    """Serialize batch result to JSON response payload.

    Args:
        batch_result: Aggregate batch result.

    Returns:
        dict[str, object]: JSON-serializable batch payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "batch_id": batch_result.batch_id,
        "jobs_requested": batch_result.requested_count,
        "jobs_started": batch_result.started_count,
        "jobs_failed": batch_result.failed_count,
        "jobs": [
            {
                "execution_id": item.execution_id,
                "job_name": item.job_name,
                "status": item.status,
                "error": item.error,
            }
            for item in batch_result.items
        ],
        "timestamp": batch_result.created_at_utc.isoformat(),
    }
