"""
Execution results.

A result is created fresh for every operation and never persisted; only the
store writes it reports are durable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class ResultStatus(str, Enum):
    EXECUTED = "executed"
    DECLINED = "declined"


class Route(str, Enum):
    FUNCTION = "function"
    FEATURE = "feature"
    MESSAGE = "message"
    UNHANDLED = "unhandled"


SCHEMA_DECLINE_REASON = "schema validation failed"


@dataclass(frozen=True)
class Decline:
    """Returned by a handler to refuse an operation. Never raised."""
    reason: str


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of one operation.

    Fields:
        status: EXECUTED or DECLINED
        route: Path the operation was classified into
        value: Handler return value (executed only)
        reason: Human-readable decline reason (declined only)
        writes: Committed (key, value) pairs in write order
    """
    status: ResultStatus
    route: Route
    value: Any = None
    reason: Optional[str] = None
    writes: Tuple[Tuple[str, Any], ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.EXECUTED

    @property
    def declined(self) -> bool:
        return self.status is ResultStatus.DECLINED

    @staticmethod
    def executed(route: Route, value: Any = None, writes: Tuple[Tuple[str, Any], ...] = ()) -> "ExecutionResult":
        return ExecutionResult(status=ResultStatus.EXECUTED, route=route, value=value, writes=writes)

    @staticmethod
    def decline(route: Route, reason: str) -> "ExecutionResult":
        return ExecutionResult(status=ResultStatus.DECLINED, route=route, reason=reason)
