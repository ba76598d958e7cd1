"""Job execution API router for start, status, cancel, completion, list and log endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import JSONResponse

from controlm_facade.jobs import (
    ExecutionCancellationResult,
    ExecutionCompletionResult,
    ExecutionLogsResult,
    ExecutionStartResult,
    ExecutionStatusResult,
    ExecutionSummary,
    JobOrchestratorPort,
    SubmissionFailedError,
)
from controlm_facade.store import DuplicateExecutionError, ExecutionNotFoundError


def api_create_jobs_router(orchestrator: JobOrchestratorPort) -> APIRouter:
    """Create job router with execution lifecycle endpoints.

    Args:
        orchestrator: Job orchestrator owning execution lifecycle operations.

    Returns:
        APIRouter: Router exposing `/control-m/jobs` APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if orchestrator is None:
        raise ValueError("orchestrator must not be None")

    router = APIRouter(prefix="/control-m/jobs", tags=["jobs"])

    @router.post("/start")
    def api_job_start(
        job_name: str = Query(min_length=1),
        job_id: str | None = Query(default=None),
        parameters: dict[str, Any] | None = Body(default=None),
    ) -> JSONResponse:
        """Submit one job and create its execution record.

        Args:
            job_name: Job name to submit.
            job_id: Optional caller-supplied execution id.
            parameters: Optional JSON object forwarded to the scheduler.

        Returns:
            JSONResponse: Accepted execution payload or error payload.

        Raises:
            RuntimeError: Raised when execution fails unexpectedly.
        """

        try:
            start_result = orchestrator.job_start(job_name=job_name, execution_id=job_id, parameters=parameters)
        except DuplicateExecutionError as error:
            return api_error_response(status.HTTP_409_CONFLICT, "DUPLICATE_EXECUTION", str(error))
        except SubmissionFailedError as error:
            payload = {
                "status": "error",
                "code": "CONTROL_M_ERROR",
                "message": str(error),
                "job_name": error.job_name,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)
        except ValueError as error:
            return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", str(error))

        return JSONResponse(content=api_serialize_start_result(start_result), status_code=status.HTTP_200_OK)

    @router.get("")
    def api_job_list(status_filter: str | None = Query(default=None, alias="status")) -> JSONResponse:
        """Return execution summaries, optionally filtered by status.

        Args:
            status_filter: Optional case-insensitive status filter.

        Returns:
            JSONResponse: Summary list payload.

        Raises:
            RuntimeError: Raised when store read fails.
        """

        try:
            list_result = orchestrator.job_list(status_filter=status_filter)
        except ValueError as error:
            return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_STATUS_FILTER", str(error))

        payload = {
            "jobs": [api_serialize_summary(summary) for summary in list_result.jobs],
            "total": list_result.total,
            "filter": list_result.filter_label,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/{execution_id}/status")
    def api_job_status(execution_id: str) -> JSONResponse:
        """Return the execution status after one reconciliation round.

        Args:
            execution_id: Internal execution id.

        Returns:
            JSONResponse: Status payload or 404 when absent.

        Raises:
            RuntimeError: Raised when execution lookup fails unexpectedly.
        """

        try:
            status_result = orchestrator.job_get_status(execution_id)
        except ExecutionNotFoundError as error:
            return api_error_response(status.HTTP_404_NOT_FOUND, "EXECUTION_NOT_FOUND", str(error))
        return JSONResponse(content=api_serialize_status_result(status_result), status_code=status.HTTP_200_OK)

    @router.post("/{execution_id}/complete")
    def api_job_complete(
        execution_id: str,
        completion_status: str = Query(alias="status", min_length=1),
        results: dict[str, Any] | None = Body(default=None),
    ) -> JSONResponse:
        """Manually mark one execution as terminal.

        Args:
            execution_id: Internal execution id.
            completion_status: Target terminal status.
            results: Optional result payload echoed back.

        Returns:
            JSONResponse: Completion payload, 400 for invalid status, 404 when absent.

        Raises:
            RuntimeError: Raised when the update fails unexpectedly.
        """

        try:
            completion_result = orchestrator.job_complete(
                execution_id=execution_id,
                status=completion_status,
                results=results,
            )
        except ExecutionNotFoundError as error:
            return api_error_response(status.HTTP_404_NOT_FOUND, "EXECUTION_NOT_FOUND", str(error))
        except ValueError as error:
            return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_STATUS", str(error))
        return JSONResponse(
            content=api_serialize_completion_result(completion_result),
            status_code=status.HTTP_200_OK,
        )

    @router.get("/{execution_id}/logs")
    def api_job_logs(execution_id: str) -> JSONResponse:
        """Return execution log lines in append order.

        Args:
            execution_id: Internal execution id.

        Returns:
            JSONResponse: Logs payload or 404 when absent.

        Raises:
            RuntimeError: Raised when log read fails unexpectedly.
        """

        try:
            logs_result = orchestrator.job_get_logs(execution_id)
        except ExecutionNotFoundError as error:
            return api_error_response(status.HTTP_404_NOT_FOUND, "EXECUTION_NOT_FOUND", str(error))
        return JSONResponse(content=api_serialize_logs_result(logs_result), status_code=status.HTTP_200_OK)

    @router.delete("/{execution_id}")
    def api_job_cancel(execution_id: str) -> JSONResponse:
        """Cancel one execution.

        Args:
            execution_id: Internal execution id.

        Returns:
            JSONResponse: Cancellation payload or 404 when absent.

        Raises:
            RuntimeError: Raised when the update fails unexpectedly.
        """

        try:
            cancellation_result = orchestrator.job_cancel(execution_id)
        except ExecutionNotFoundError as error:
            return api_error_response(status.HTTP_404_NOT_FOUND, "EXECUTION_NOT_FOUND", str(error))
        return JSONResponse(
            content=api_serialize_cancellation_result(cancellation_result),
            status_code=status.HTTP_200_OK,
        )

    return router


def api_error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the shared error payload shape.

    Args:
        status_code: HTTP status code.
        code: Deterministic error code.
        message: Human-readable message.

    Returns:
        JSONResponse: Error response.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return JSONResponse(
        content={"status": "error", "code": code, "message": message},
        status_code=status_code,
    )


def api_serialize_start_result(start_result: ExecutionStartResult) -> dict[str, object]:
    return {
        "execution_id": start_result.execution_id,
        "job_name": start_result.job_name,
        "status": start_result.status.value,
        "timestamp": start_result.submitted_at_utc.isoformat(),
        "message": start_result.message,
        "external_job_id": start_result.external_job_id,
        "estimated_duration": start_result.estimated_duration,
    }


def api_serialize_status_result(status_result: ExecutionStatusResult) -> dict[str, object]:
    return {
        "execution_id": status_result.execution_id,
        "job_name": status_result.job_name,
        "status": status_result.status.value,
        "start_time": status_result.started_at_utc.isoformat(),
        "end_time": status_result.ended_at_utc.isoformat() if status_result.ended_at_utc else None,
        "duration": status_result.duration_text,
        "duration_seconds": status_result.duration_seconds,
        "parameters": status_result.parameters,
        "external_job_id": status_result.external_job_id,
        "reconciliation": status_result.reconciliation,
    }


def api_serialize_cancellation_result(cancellation_result: ExecutionCancellationResult) -> dict[str, object]:
    return {
        "execution_id": cancellation_result.execution_id,
        "job_name": cancellation_result.job_name,
        "status": cancellation_result.status.value,
        "message": cancellation_result.message,
        "cancellation_applied": cancellation_result.cancellation_applied,
        "remote_cancel_outcome": cancellation_result.remote_cancel_outcome,
        "end_time": cancellation_result.ended_at_utc.isoformat() if cancellation_result.ended_at_utc else None,
    }


def api_serialize_completion_result(completion_result: ExecutionCompletionResult) -> dict[str, object]:
    return {
        "execution_id": completion_result.execution_id,
        "job_name": completion_result.job_name,
        "status": completion_result.status.value,
        "completion_applied": completion_result.completion_applied,
        "completed_at": completion_result.completed_at_utc.isoformat()
        if completion_result.completed_at_utc
        else None,
        "duration": completion_result.duration_text,
        "results": completion_result.results,
        "message": completion_result.message,
    }


def api_serialize_summary(summary: ExecutionSummary) -> dict[str, object]:
    return {
        "execution_id": summary.execution_id,
        "job_name": summary.job_name,
        "status": summary.status.value,
        "start_time": summary.started_at_utc.isoformat(),
        "duration": summary.duration_text,
        "duration_seconds": summary.duration_seconds,
    }


def api_serialize_logs_result(logs_result: ExecutionLogsResult) -> dict[str, object]:
    return {
        "execution_id": logs_result.execution_id,
        "logs": [entry.entry_format_line() for entry in logs_result.entries],
        "log_count": logs_result.log_count,
        "dropped_count": logs_result.dropped_count,
    }
