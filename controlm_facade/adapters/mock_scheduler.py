"""In-process Control-M simulator for development and tests."""

from __future__ import annotations

import itertools
import threading
import time
from typing import Any, Final, Mapping

from .controlm_errors import SchedulerRequestError
from .interfaces import REMOTE_JOB_STATUSES, SchedulerClientPort, SchedulerJobStatus, SchedulerSubmitResult


class MockControlMScheduler(SchedulerClientPort):
    """Scheduler port implementation that simulates Control-M responses.

    Status is derived from the last digit of the generated job id unless a
    status was pinned through `mock_set_status`.
    """

    _ESTIMATED_DURATIONS: Final[dict[str, str]] = {
        "quicktest": "30 seconds",
        "dailyreport": "5 minutes",
        "dataextract": "10 minutes",
        "datatransform": "15 minutes",
        "dataload": "20 minutes",
    }
    _DEFAULT_ESTIMATED_DURATION: Final[str] = "5 minutes"
    _SIMULATED_START_TIME: Final[str] = "2025-01-15T14:00:00Z"
    _SIMULATED_END_TIME: Final[str] = "2025-01-15T14:05:00Z"

    def __init__(self, latency_seconds: float = 0.0, first_job_number: int = 1):
        """Initialize simulator state.

        Args:
            latency_seconds: Sleep applied to each submission.
            first_job_number: First numeric suffix used for generated job ids.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when latency is negative.
        """

        if latency_seconds < 0:
            raise ValueError("latency_seconds must be >= 0")

        self._latency_seconds = latency_seconds
        self._job_numbers = itertools.count(first_job_number)
        self._lock = threading.Lock()
        self._submitted_jobs: dict[str, str] = {}
        self._pinned_statuses: dict[str, str] = {}
        self._cancel_reasons: dict[str, str] = {}

    def adapter_source_name(self) -> str:
        return "controlm_mock"

    def adapter_submit_job(self, job_name: str, parameters: Mapping[str, Any]) -> SchedulerSubmitResult:
        """Simulate one submission and return a generated job id.

        Args:
            job_name: Job name used to choose the duration estimate.
            parameters: Ignored by the simulator.

        Returns:
            SchedulerSubmitResult: Generated `CTM_JOB_<n>` id and duration estimate.

        Raises:
            ValueError: Raised when job name is blank.
        """

        normalized_job_name = job_name.strip()
        if not normalized_job_name:
            raise ValueError("job_name must not be blank")
        _ = parameters

        if self._latency_seconds > 0:
            time.sleep(self._latency_seconds)

        with self._lock:
            external_job_id = f"CTM_JOB_{next(self._job_numbers)}"
            self._submitted_jobs[external_job_id] = normalized_job_name

        return SchedulerSubmitResult(
            external_job_id=external_job_id,
            estimated_duration=self._ESTIMATED_DURATIONS.get(
                normalized_job_name.lower(),
                self._DEFAULT_ESTIMATED_DURATION,
            ),
        )

    def adapter_job_status(self, external_job_id: str) -> SchedulerJobStatus:
        """Return the simulated status for one job id.

        Args:
            external_job_id: Job id previously returned by submission.

        Returns:
            SchedulerJobStatus: Simulated status payload.

        Raises:
            SchedulerRequestError: Raised when the id is unknown to the simulator.
        """

        with self._lock:
            if external_job_id not in self._submitted_jobs:
                raise SchedulerRequestError(f"unknown Control-M job={external_job_id}", status_code=404)
            status_value = self._pinned_statuses.get(external_job_id) or self._mock_derive_status(external_job_id)

        output_by_status = {
            "SUCCESS": "Job completed successfully",
            "FAILED": "Job failed due to timeout",
        }
        return SchedulerJobStatus(
            external_job_id=external_job_id,
            status=status_value,
            started_at=self._SIMULATED_START_TIME,
            ended_at=self._SIMULATED_END_TIME if status_value in ("SUCCESS", "FAILED") else None,
            output=output_by_status.get(status_value, "Job in progress"),
        )

    def adapter_cancel_job(self, external_job_id: str, reason: str) -> None:
        with self._lock:
            if external_job_id not in self._submitted_jobs:
                raise SchedulerRequestError(f"unknown Control-M job={external_job_id}", status_code=404)
            self._cancel_reasons[external_job_id] = reason

    def mock_set_status(self, external_job_id: str, status: str) -> None:
        """Pin the status the simulator reports for one job id.

        Args:
            external_job_id: Job id previously returned by submission.
            status: Remote status value.

        Returns:
            None: Simulator state is updated as side effect.

        Raises:
            ValueError: Raised when the status is not a remote scheduler status.
        """

        normalized_status = status.strip().upper()
        if normalized_status not in REMOTE_JOB_STATUSES:
            raise ValueError(f"unsupported remote status={status}")
        with self._lock:
            self._pinned_statuses[external_job_id] = normalized_status

    def mock_cancel_reason(self, external_job_id: str) -> str | None:
        with self._lock:
            return self._cancel_reasons.get(external_job_id)

    def _mock_derive_status(self, external_job_id: str) -> str:
        if external_job_id.endswith(("1", "3")):
            return "SUCCESS"
        if external_job_id.endswith("2"):
            return "RUNNING"
        return "FAILED"
