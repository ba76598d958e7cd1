"""Domain models used across application layer boundaries."""

from .lifecycle import (
	domain_execution_duration_seconds,
	domain_execution_duration_text,
	domain_execution_transition,
	domain_validate_execution_invariants,
)
from .models import (
	TERMINAL_EXECUTION_STATUSES,
	ExecutionLogEntry,
	ExecutionRecord,
	ExecutionStatus,
	domain_parse_execution_status,
)

__all__ = [
	"ExecutionLogEntry",
	"ExecutionRecord",
	"ExecutionStatus",
	"TERMINAL_EXECUTION_STATUSES",
	"domain_execution_duration_seconds",
	"domain_execution_duration_text",
	"domain_execution_transition",
	"domain_parse_execution_status",
	"domain_validate_execution_invariants",
]
