"""Typed domain models shared across runtime layers.

This module provides the execution record and log entry contracts that the
store, job and API layers exchange.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ExecutionStatus(str, Enum):
    """Lifecycle states of one job execution.

    `RUNNING` is the only non-terminal state; every other state is absorbing.
    """

    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    INTERRUPTED = "INTERRUPTED"

    @property
    def is_terminal(self) -> bool:
        return self is not ExecutionStatus.RUNNING


TERMINAL_EXECUTION_STATUSES: frozenset[ExecutionStatus] = frozenset(
    status for status in ExecutionStatus if status.is_terminal
)


def domain_parse_execution_status(value: str) -> ExecutionStatus:
    """Parse a caller-supplied status string case-insensitively.

    Args:
        value: Raw status text such as `running` or `Success`.

    Returns:
        ExecutionStatus: Canonical status member.

    Raises:
        ValueError: Raised when the value is blank or not a known status.
    """

    normalized_value = (value or "").strip().upper()
    if not normalized_value:
        raise ValueError("status must not be blank")
    try:
        return ExecutionStatus(normalized_value)
    except ValueError as error:
        allowed_values = ", ".join(status.value for status in ExecutionStatus)
        raise ValueError(f"unsupported status={value}; expected one of {allowed_values}") from error


@dataclass(frozen=True)
class ExecutionRecord:
    """Tracked state for one job execution.

    Attributes:
        execution_id: Unique execution identity, caller-supplied or generated.
        job_name: Name of the submitted job.
        status: Current lifecycle status.
        started_at_utc: Creation timestamp in UTC.
        ended_at_utc: Terminal transition timestamp; set only for terminal statuses.
        parameters: Read-only deep copy of the caller parameter mapping.
        external_job_id: Remote scheduler job identity, when submission succeeded.
    """

    execution_id: str
    job_name: str
    status: ExecutionStatus
    started_at_utc: datetime
    ended_at_utc: datetime | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    external_job_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.parameters, MappingProxyType):
            object.__setattr__(self, "parameters", MappingProxyType(copy.deepcopy(dict(self.parameters))))

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class ExecutionLogEntry:
    """One timestamped execution log line.

    Attributes:
        at_utc: Append timestamp in UTC.
        message: Log message text.
    """

    at_utc: datetime
    message: str

    def entry_format_line(self) -> str:
        """Render the entry as `<iso timestamp>: <message>`."""

        return f"{self.at_utc.isoformat()}: {self.message}"
