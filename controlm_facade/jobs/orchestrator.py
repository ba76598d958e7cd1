"""Job-layer orchestrator for execution lifecycle and scheduler reconciliation."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping
from uuid import uuid4

from controlm_facade.adapters import SchedulerClientPort, SchedulerJobStatus
from controlm_facade.domain import (
    ExecutionRecord,
    ExecutionStatus,
    domain_execution_duration_seconds,
    domain_execution_duration_text,
    domain_execution_transition,
    domain_parse_execution_status,
)
from controlm_facade.store import (
    DuplicateExecutionError,
    ExecutionLogPort,
    ExecutionNotFoundError,
    ExecutionStorePort,
    ExecutionUpdateResult,
)

from .interfaces import (
    RECONCILIATION_APPLIED,
    RECONCILIATION_NOT_REQUIRED,
    RECONCILIATION_SKIPPED,
    RECONCILIATION_UNCHANGED,
    REMOTE_CANCEL_ACKNOWLEDGED,
    REMOTE_CANCEL_FAILED,
    REMOTE_CANCEL_NOT_ATTEMPTED,
    ExecutionCancellationResult,
    ExecutionCompletionResult,
    ExecutionListResult,
    ExecutionLogsResult,
    ExecutionStartResult,
    ExecutionStatusResult,
    ExecutionSummary,
    JobOrchestratorPort,
    SubmissionFailedError,
)

logger = logging.getLogger(__name__)

_REMOTE_CALL_ERRORS = (TimeoutError, ConnectionError, ValueError, RuntimeError)


@dataclass(frozen=True)
class JobOrchestratorConfig:
    """Configuration values for execution orchestration.

    Attributes:
        cancel_reason: Reason forwarded with remote cancel requests.
    """

    cancel_reason: str = "User requested cancellation"


def _job_utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _job_generate_execution_id() -> str:
    return str(uuid4())


class ControlMJobOrchestrator(JobOrchestratorPort):
    """Concrete orchestrator mediating local execution state and Control-M.

    Every status change goes through `ExecutionStorePort.store_update` with the
    domain transition function, so terminal outcomes are never overwritten no
    matter which caller (reconciliation, cancel, manual completion) races.
    """

    def __init__(
        self,
        execution_store: ExecutionStorePort,
        execution_log: ExecutionLogPort,
        scheduler_client: SchedulerClientPort,
        config: JobOrchestratorConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        execution_id_factory: Callable[[], str] | None = None,
    ):
        """Initialize orchestrator dependencies.

        Args:
            execution_store: Store owning execution records.
            execution_log: Append-only execution log.
            scheduler_client: Adapter for the external scheduler.
            config: Orchestration configuration.
            clock: Optional UTC clock, injectable for deterministic tests.
            execution_id_factory: Optional generator for execution ids.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if execution_store is None:
            raise ValueError("execution_store must not be None")
        if execution_log is None:
            raise ValueError("execution_log must not be None")
        if scheduler_client is None:
            raise ValueError("scheduler_client must not be None")

        resolved_config = config or JobOrchestratorConfig()
        if not resolved_config.cancel_reason.strip():
            raise ValueError("config.cancel_reason must not be blank")

        self._execution_store = execution_store
        self._execution_log = execution_log
        self._scheduler_client = scheduler_client
        self._config = resolved_config
        self._clock = clock or _job_utc_now
        self._execution_id_factory = execution_id_factory or _job_generate_execution_id

    def job_start(
        self,
        job_name: str,
        execution_id: str | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> ExecutionStartResult:
        """Submit one job to Control-M and create its RUNNING execution record.

        The record is created only after the remote submission succeeded, so a
        failed submission leaves no trace in the store.

        Args:
            job_name: Job name to submit.
            execution_id: Optional caller-supplied execution id; generated when absent or blank.
            parameters: Optional caller parameter mapping.

        Returns:
            ExecutionStartResult: Accepted execution handle.

        Raises:
            ValueError: Raised when job name is blank.
            DuplicateExecutionError: Raised when the execution id already exists.
            SubmissionFailedError: Raised when remote submission failed.
        """

        normalized_job_name = (job_name or "").strip()
        if not normalized_job_name:
            raise ValueError("job_name must not be blank")
        resolved_execution_id = (execution_id or "").strip() or self._execution_id_factory()
        resolved_parameters = dict(parameters or {})

        if self._execution_store.store_contains(resolved_execution_id):
            raise DuplicateExecutionError(resolved_execution_id)

        logger.info("Starting Control-M job: %s with execution ID: %s", normalized_job_name, resolved_execution_id)
        try:
            submit_result = self._scheduler_client.adapter_submit_job(
                job_name=normalized_job_name,
                parameters=resolved_parameters,
            )
        except _REMOTE_CALL_ERRORS as error:
            logger.error(
                "Failed to submit Control-M job: %s (execution ID: %s): %s",
                normalized_job_name,
                resolved_execution_id,
                error,
            )
            raise SubmissionFailedError(
                f"Failed to submit job to Control-M: {error}",
                job_name=normalized_job_name,
                execution_id=resolved_execution_id,
            ) from error

        submitted_at = self._clock()
        submission_message = f"Job submitted to Control-M with ID: {submit_result.external_job_id}"
        try:
            record = self._execution_store.store_create(
                execution_id=resolved_execution_id,
                job_name=normalized_job_name,
                parameters=resolved_parameters,
                external_job_id=submit_result.external_job_id,
                started_at_utc=submitted_at,
                on_created=lambda created: self._execution_log.log_append(
                    created.execution_id,
                    submission_message,
                    at_utc=submitted_at,
                ),
            )
        except DuplicateExecutionError:
            logger.warning(
                "Execution ID %s was claimed concurrently; withdrawing Control-M job %s",
                resolved_execution_id,
                submit_result.external_job_id,
            )
            self._job_cancel_remote(
                execution_id=resolved_execution_id,
                external_job_id=submit_result.external_job_id,
                append_log=False,
            )
            raise

        return ExecutionStartResult(
            execution_id=record.execution_id,
            job_name=record.job_name,
            status=record.status,
            submitted_at_utc=submitted_at,
            message="Job has been queued for execution",
            external_job_id=record.external_job_id,
            estimated_duration=submit_result.estimated_duration,
        )

    def job_get_status(self, execution_id: str) -> ExecutionStatusResult:
        """Return execution status, reconciling once with Control-M while RUNNING.

        Remote failures never surface here: the last known local status is
        returned and the skip is logged.

        Args:
            execution_id: Internal execution id.

        Returns:
            ExecutionStatusResult: Status projection with reconciliation marker.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """

        record = self._execution_store.store_get(execution_id)
        if record.is_terminal or record.external_job_id is None:
            return self._job_build_status_result(record, reconciliation=RECONCILIATION_NOT_REQUIRED)

        try:
            remote_status = self._scheduler_client.adapter_job_status(record.external_job_id)
        except _REMOTE_CALL_ERRORS as error:
            logger.warning(
                "Reconciliation skipped for execution %s (Control-M job %s), using local status %s: %s",
                record.execution_id,
                record.external_job_id,
                record.status.value,
                error,
            )
            return self._job_build_status_result(record, reconciliation=RECONCILIATION_SKIPPED)

        if not remote_status.is_terminal:
            return self._job_build_status_result(record, reconciliation=RECONCILIATION_UNCHANGED)

        update_result = self._job_apply_terminal_transition(
            execution_id=record.execution_id,
            target_status=self._job_map_remote_terminal_status(remote_status),
            log_message=self._job_reconciliation_log_message(remote_status),
        )
        reconciliation = RECONCILIATION_APPLIED if update_result.update_applied else RECONCILIATION_UNCHANGED
        return self._job_build_status_result(update_result.current, reconciliation=reconciliation)

    def job_cancel(self, execution_id: str) -> ExecutionCancellationResult:
        """Cancel one execution.

        Local cancellation is authoritative: the remote cancel is best-effort
        and its failure only produces a log line. Cancelling a terminal
        execution returns its existing status unchanged.

        Args:
            execution_id: Internal execution id.

        Returns:
            ExecutionCancellationResult: Cancellation outcome.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """

        record = self._execution_store.store_get(execution_id)
        if record.is_terminal:
            return self._job_build_cancellation_result(
                record=record,
                cancellation_applied=False,
                remote_cancel_outcome=REMOTE_CANCEL_NOT_ATTEMPTED,
            )

        remote_cancel_outcome = REMOTE_CANCEL_NOT_ATTEMPTED
        if record.external_job_id is not None:
            remote_cancel_outcome = self._job_cancel_remote(
                execution_id=record.execution_id,
                external_job_id=record.external_job_id,
                append_log=True,
            )

        update_result = self._job_apply_terminal_transition(
            execution_id=record.execution_id,
            target_status=ExecutionStatus.CANCELLED,
            log_message="Job cancelled by user request",
        )
        if not update_result.update_applied and remote_cancel_outcome != REMOTE_CANCEL_NOT_ATTEMPTED:
            # Another caller recorded a terminal outcome while the remote cancel was in flight.
            self._execution_log.log_append(
                record.execution_id,
                f"Cancellation not applied: job already in terminal status {update_result.current.status.value}",
                at_utc=self._clock(),
            )
            logger.info(
                "Cancel for execution %s lost the race to terminal status %s",
                record.execution_id,
                update_result.current.status.value,
            )
        return self._job_build_cancellation_result(
            record=update_result.current,
            cancellation_applied=update_result.update_applied,
            remote_cancel_outcome=remote_cancel_outcome,
        )

    def job_complete(
        self,
        execution_id: str,
        status: str | ExecutionStatus,
        results: Mapping[str, Any] | None = None,
    ) -> ExecutionCompletionResult:
        """Manually move one RUNNING execution to a terminal status.

        Control-M is not notified; the override only affects local state.

        Args:
            execution_id: Internal execution id.
            status: Target terminal status, case-insensitive when given as text.
            results: Optional caller result payload echoed back.

        Returns:
            ExecutionCompletionResult: Completion outcome.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
            ValueError: Raised when status is unknown or not terminal.
        """

        target_status = status if isinstance(status, ExecutionStatus) else domain_parse_execution_status(status)
        if not target_status.is_terminal:
            raise ValueError(f"completion status must be terminal, got {target_status.value}")

        update_result = self._job_apply_terminal_transition(
            execution_id=execution_id,
            target_status=target_status,
            log_message=f"Job manually completed with status {target_status.value}",
        )
        record = update_result.current
        if update_result.update_applied:
            message = f"Job marked as {record.status.value}"
        else:
            message = f"Job already in terminal status {record.status.value}"
        return ExecutionCompletionResult(
            execution_id=record.execution_id,
            job_name=record.job_name,
            status=record.status,
            completion_applied=update_result.update_applied,
            completed_at_utc=record.ended_at_utc,
            duration_text=domain_execution_duration_text(record, now_utc=self._clock()),
            results=dict(results or {}),
            message=message,
        )

    def job_list(self, status_filter: str | ExecutionStatus | None = None) -> ExecutionListResult:
        """Return execution summaries without reconciling against Control-M.

        Args:
            status_filter: Optional status filter, case-insensitive when given as text.

        Returns:
            ExecutionListResult: Snapshot of matching executions.

        Raises:
            ValueError: Raised when the status filter is unknown.
        """

        resolved_filter: ExecutionStatus | None = None
        if isinstance(status_filter, ExecutionStatus):
            resolved_filter = status_filter
        elif status_filter is not None and status_filter.strip():
            resolved_filter = domain_parse_execution_status(status_filter)

        now_utc = self._clock()
        summaries = tuple(
            ExecutionSummary(
                execution_id=record.execution_id,
                job_name=record.job_name,
                status=record.status,
                started_at_utc=record.started_at_utc,
                duration_seconds=domain_execution_duration_seconds(record, now_utc=now_utc),
                duration_text=domain_execution_duration_text(record, now_utc=now_utc),
            )
            for record in self._execution_store.store_list(status_filter=resolved_filter)
        )
        return ExecutionListResult(
            jobs=summaries,
            total=len(summaries),
            filter_label=resolved_filter.value if resolved_filter is not None else "ALL",
        )

    def job_get_logs(self, execution_id: str) -> ExecutionLogsResult:
        """Return execution log entries in append order.

        Args:
            execution_id: Internal execution id.

        Returns:
            ExecutionLogsResult: Retained entries and retention counters.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """

        if not self._execution_store.store_contains(execution_id):
            raise ExecutionNotFoundError(execution_id)

        log_snapshot = self._execution_log.log_snapshot(execution_id)
        return ExecutionLogsResult(
            execution_id=execution_id,
            entries=log_snapshot.entries,
            log_count=len(log_snapshot.entries),
            dropped_count=log_snapshot.dropped_count,
        )

    def _job_apply_terminal_transition(
        self,
        execution_id: str,
        target_status: ExecutionStatus,
        log_message: str,
    ) -> ExecutionUpdateResult:
        """Run the single terminal mutation path and log it when it lands.

        The log line is appended inside the store critical section, so any
        reader that sees the terminal status also sees its log line.

        Args:
            execution_id: Internal execution id.
            target_status: Requested terminal status.
            log_message: Execution log line appended when the transition is applied.

        Returns:
            ExecutionUpdateResult: Store update outcome.

        Raises:
            ExecutionNotFoundError: Raised when the execution id is unknown.
        """

        transition_at = self._clock()
        update_result = self._execution_store.store_update(
            execution_id,
            lambda record: domain_execution_transition(record, target_status, transition_at),
            on_applied=lambda _: self._execution_log.log_append(execution_id, log_message, at_utc=transition_at),
        )
        if update_result.update_applied:
            logger.info(
                "Execution %s (%s) transitioned %s -> %s",
                execution_id,
                update_result.current.job_name,
                update_result.previous.status.value,
                update_result.current.status.value,
            )
        return update_result

    def _job_cancel_remote(self, execution_id: str, external_job_id: str, append_log: bool) -> str:
        """Best-effort remote cancel.

        Args:
            execution_id: Internal execution id.
            external_job_id: Remote scheduler job id.
            append_log: Whether to record the outcome in the execution log.

        Returns:
            str: Remote cancel outcome marker.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        try:
            self._scheduler_client.adapter_cancel_job(external_job_id, reason=self._config.cancel_reason)
        except _REMOTE_CALL_ERRORS as error:
            logger.warning(
                "Remote cancel failed for execution %s (Control-M job %s); local cancellation proceeds: %s",
                execution_id,
                external_job_id,
                error,
            )
            if append_log:
                self._execution_log.log_append(
                    execution_id,
                    f"Remote cancel failed for Control-M job {external_job_id}: {error}",
                    at_utc=self._clock(),
                )
            return REMOTE_CANCEL_FAILED

        if append_log:
            self._execution_log.log_append(
                execution_id,
                f"Remote cancel acknowledged by Control-M for job {external_job_id}",
                at_utc=self._clock(),
            )
        return REMOTE_CANCEL_ACKNOWLEDGED

    def _job_map_remote_terminal_status(self, remote_status: SchedulerJobStatus) -> ExecutionStatus:
        if remote_status.status == "SUCCESS":
            return ExecutionStatus.SUCCESS
        return ExecutionStatus.FAILED

    def _job_reconciliation_log_message(self, remote_status: SchedulerJobStatus) -> str:
        if remote_status.status == "SUCCESS":
            message = "Job completed successfully in Control-M"
        else:
            message = "Job failed in Control-M"
        if remote_status.output:
            message = f"{message}: {remote_status.output}"
        return message

    def _job_build_status_result(self, record: ExecutionRecord, reconciliation: str) -> ExecutionStatusResult:
        now_utc = self._clock()
        return ExecutionStatusResult(
            execution_id=record.execution_id,
            job_name=record.job_name,
            status=record.status,
            started_at_utc=record.started_at_utc,
            ended_at_utc=record.ended_at_utc,
            duration_seconds=domain_execution_duration_seconds(record, now_utc=now_utc),
            duration_text=domain_execution_duration_text(record, now_utc=now_utc),
            parameters=copy.deepcopy(dict(record.parameters)),
            external_job_id=record.external_job_id,
            reconciliation=reconciliation,
        )

    def _job_build_cancellation_result(
        self,
        record: ExecutionRecord,
        cancellation_applied: bool,
        remote_cancel_outcome: str,
    ) -> ExecutionCancellationResult:
        if cancellation_applied:
            message = "Job has been cancelled"
        else:
            message = f"Job already in terminal status {record.status.value}"
        return ExecutionCancellationResult(
            execution_id=record.execution_id,
            job_name=record.job_name,
            status=record.status,
            message=message,
            cancellation_applied=cancellation_applied,
            remote_cancel_outcome=remote_cancel_outcome,
            ended_at_utc=record.ended_at_utc,
        )
