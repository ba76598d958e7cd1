"""Store layer package for in-process execution state and log retention."""

from .execution_log import InMemoryExecutionLog
from .execution_store import InMemoryExecutionStore
from .interfaces import (
	DuplicateExecutionError,
	ExecutionLogPort,
	ExecutionLogSnapshot,
	ExecutionNotFoundError,
	ExecutionStorePort,
	ExecutionUpdateResult,
)

__all__ = [
	"DuplicateExecutionError",
	"ExecutionLogPort",
	"ExecutionLogSnapshot",
	"ExecutionNotFoundError",
	"ExecutionStorePort",
	"ExecutionUpdateResult",
	"InMemoryExecutionLog",
	"InMemoryExecutionStore",
]
