"""Job layer package for execution lifecycle orchestration boundaries."""

from .batch_coordinator import BatchJobCoordinator
from .interfaces import (
	BATCH_ITEM_FAILED,
	BATCH_ITEM_STARTED,
	RECONCILIATION_APPLIED,
	RECONCILIATION_NOT_REQUIRED,
	RECONCILIATION_SKIPPED,
	RECONCILIATION_UNCHANGED,
	REMOTE_CANCEL_ACKNOWLEDGED,
	REMOTE_CANCEL_FAILED,
	REMOTE_CANCEL_NOT_ATTEMPTED,
	BatchCoordinatorPort,
	BatchJobItemResult,
	BatchJobRequest,
	BatchJobResult,
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
from .orchestrator import ControlMJobOrchestrator, JobOrchestratorConfig

__all__ = [
	"BATCH_ITEM_FAILED",
	"BATCH_ITEM_STARTED",
	"RECONCILIATION_APPLIED",
	"RECONCILIATION_NOT_REQUIRED",
	"RECONCILIATION_SKIPPED",
	"RECONCILIATION_UNCHANGED",
	"REMOTE_CANCEL_ACKNOWLEDGED",
	"REMOTE_CANCEL_FAILED",
	"REMOTE_CANCEL_NOT_ATTEMPTED",
	"BatchCoordinatorPort",
	"BatchJobCoordinator",
	"BatchJobItemResult",
	"BatchJobRequest",
	"BatchJobResult",
	"ControlMJobOrchestrator",
	"ExecutionCancellationResult",
	"ExecutionCompletionResult",
	"ExecutionListResult",
	"ExecutionLogsResult",
	"ExecutionStartResult",
	"ExecutionStatusResult",
	"ExecutionSummary",
	"JobOrchestratorConfig",
	"JobOrchestratorPort",
	"SubmissionFailedError",
]
