"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Any, Final, Mapping, Protocol

REMOTE_JOB_STATUSES: Final[frozenset[str]] = frozenset({"SUBMITTED", "RUNNING", "SUCCESS", "FAILED"})


@dataclass(frozen=True)
class SchedulerSubmitResult:
    """Result contract for remote job submission.

    Attributes:
        external_job_id: Remote scheduler identity for the submitted job.
        estimated_duration: Optional human-readable duration estimate from upstream.
    """

    external_job_id: str
    estimated_duration: str | None = None


@dataclass(frozen=True)
class SchedulerJobStatus:
    """Result contract for remote job status lookups.

    Attributes:
        external_job_id: Remote scheduler job identity.
        status: Upper-cased remote status (`SUBMITTED`, `RUNNING`, `SUCCESS`, `FAILED`).
        started_at: Optional remote start time text.
        ended_at: Optional remote end time text.
        output: Optional remote output summary.
    """

    external_job_id: str
    status: str
    started_at: str | None = None
    ended_at: str | None = None
    output: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in ("SUCCESS", "FAILED")


class SchedulerClientPort(Protocol):
    """Port definition for submit/status/cancel calls against the external scheduler."""

    def adapter_source_name(self) -> str:
        """Return adapter source identifier for diagnostics and health output.

        Returns:
            str: Human-readable upstream source identifier.

        Raises:
            RuntimeError: Raised when source metadata is unavailable.
        """

    def adapter_submit_job(self, job_name: str, parameters: Mapping[str, Any]) -> SchedulerSubmitResult:
        """Submit one job to the external scheduler.

        Args:
            job_name: Job name known to the scheduler.
            parameters: Caller parameter mapping forwarded as-is.

        Returns:
            SchedulerSubmitResult: Remote identity and duration estimate.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
            ValueError: Raised when upstream rejects the submission.
        """

    def adapter_job_status(self, external_job_id: str) -> SchedulerJobStatus:
        """Fetch the current remote status for one job.

        Args:
            external_job_id: Remote scheduler job identity.

        Returns:
            SchedulerJobStatus: Normalized remote status payload.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
            ValueError: Raised when upstream payload is invalid.
        """

    def adapter_cancel_job(self, external_job_id: str, reason: str) -> None:
        """Request remote cancellation for one job.

        Args:
            external_job_id: Remote scheduler job identity.
            reason: Human-readable cancellation reason.

        Returns:
            None: Acknowledgement carries no payload.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
        """
