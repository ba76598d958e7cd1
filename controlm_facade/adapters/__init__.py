"""Adapter layer package for external scheduler integration boundaries."""

from .controlm_errors import (
	SchedulerAdapterError,
	SchedulerConnectionError,
	SchedulerRequestError,
	SchedulerTimeoutError,
)
from .controlm_web_service import ControlMWebServiceAdapter
from .interfaces import (
	REMOTE_JOB_STATUSES,
	SchedulerClientPort,
	SchedulerJobStatus,
	SchedulerSubmitResult,
)
from .mock_scheduler import MockControlMScheduler

__all__ = [
	"ControlMWebServiceAdapter",
	"MockControlMScheduler",
	"REMOTE_JOB_STATUSES",
	"SchedulerAdapterError",
	"SchedulerClientPort",
	"SchedulerConnectionError",
	"SchedulerJobStatus",
	"SchedulerRequestError",
	"SchedulerSubmitResult",
	"SchedulerTimeoutError",
]
