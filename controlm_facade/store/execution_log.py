"""In-memory append-only execution log with bounded per-execution retention."""

from __future__ import annotations

import threading
from collections import deque
from datetime import datetime, timezone

from controlm_facade.domain import ExecutionLogEntry

from .interfaces import ExecutionLogPort, ExecutionLogSnapshot


class _ExecutionLogBuffer:
    """Ring buffer plus lifetime append counter for one execution."""

    def __init__(self, max_entries: int):
        self.entries: deque[ExecutionLogEntry] = deque(maxlen=max_entries)
        self.appended_count = 0


class InMemoryExecutionLog(ExecutionLogPort):
    """Per-execution log store.

    Entries are kept in append order. Once an execution exceeds
    `max_entries`, the oldest entries are evicted and counted as dropped.
    """

    def __init__(self, max_entries: int = 1000):
        """Initialize log store.

        Args:
            max_entries: Retention limit per execution.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when max_entries is below 1.
        """

        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._buffers: dict[str, _ExecutionLogBuffer] = {}

    def log_append(self, execution_id: str, message: str, at_utc: datetime | None = None) -> ExecutionLogEntry:
        """Append one entry to the execution log.

        Args:
            execution_id: Execution id.
            message: Log message text.
            at_utc: Optional timestamp override.

        Returns:
            ExecutionLogEntry: Appended entry.

        Raises:
            ValueError: Raised when message is blank.
        """

        normalized_message = (message or "").strip()
        if not normalized_message:
            raise ValueError("message must not be blank")

        entry = ExecutionLogEntry(at_utc=at_utc or datetime.now(timezone.utc), message=normalized_message)
        with self._lock:
            log_buffer = self._buffers.get(execution_id)
            if log_buffer is None:
                log_buffer = _ExecutionLogBuffer(max_entries=self._max_entries)
                self._buffers[execution_id] = log_buffer
            log_buffer.entries.append(entry)
            log_buffer.appended_count += 1
        return entry

    def log_snapshot(self, execution_id: str) -> ExecutionLogSnapshot:
        with self._lock:
            log_buffer = self._buffers.get(execution_id)
            if log_buffer is None:
                return ExecutionLogSnapshot(entries=(), appended_count=0, dropped_count=0)
            entries = tuple(log_buffer.entries)
            appended_count = log_buffer.appended_count
        return ExecutionLogSnapshot(
            entries=entries,
            appended_count=appended_count,
            dropped_count=appended_count - len(entries),
        )

    def log_reset(self) -> None:
        with self._lock:
            self._buffers.clear()
