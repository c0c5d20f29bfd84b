"""Error Hierarchy — typed, categorized exceptions for every writepath failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - PreconditionNotMetError aborts the current unit of work only
    - DatabaseConnectionError is fatal for the whole run
    - to_dict() produces the envelope attached to structured log records

Design Decisions:
    - Single hierarchy with WritePathError base: the runner catches one type
    - ErrorContext as dataclass: observability without coupling to the logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    PRECONDITION = "precondition"
    DATABASE = "database"
    CONNECTION = "connection"


@dataclass
class ErrorContext:
    """Context captured where the error was raised."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    entity: str | None = None
    lookup: dict[str, Any] | None = None
    debug_info: dict[str, Any] | None = None


class WritePathError(Exception):
    """Base exception for all writepath errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a flat error envelope for logs."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "operation": self.context.operation,
            "entity": self.context.entity,
            "lookup": self.context.lookup,
        }


class PreconditionNotMetError(WritePathError):
    """A lookup inside a unit of work found no matching row."""
    def __init__(
        self,
        entity: str,
        lookup: dict[str, Any],
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity = entity
        ctx.lookup = lookup
        criteria = ", ".join(f"{k}={v!r}" for k, v in lookup.items())
        super().__init__(
            f"{entity} not found ({criteria})",
            "PRECONDITION_NOT_MET", ErrorCategory.PRECONDITION,
            ErrorSeverity.ERROR, ctx,
        )


class StorageError(WritePathError):
    """Any failure reported by the database or driver."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation


class DatabaseConnectionError(WritePathError):
    """The initial connection to the database could not be established."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot connect to database: {message}",
            "CONNECTION_ERROR", ErrorCategory.CONNECTION,
            ErrorSeverity.CRITICAL, context,
        )
