"""
Clock-in failure taxonomy.

Every failure is its own exception class so callers branch on the type,
never on message text. ``str(exc)`` is the human-readable message that the
HTTP layer returns to clients.
"""

from __future__ import annotations

from datetime import datetime


class AttendanceError(Exception):
    """Base class for every clock-in failure."""


class ValidationError(AttendanceError):
    """Input rejected before any I/O took place."""


class EmptyEmployeeIdError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Employee ID cannot be empty")


class InvalidTimestampError(ValidationError):
    """Timestamp is unparseable or carries no UTC offset."""

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid timestamp: {value!r} ({reason})")


class FutureTimestampError(ValidationError):
    def __init__(self, timestamp: datetime, now: datetime) -> None:
        self.timestamp = timestamp
        self.now = now
        super().__init__(
            f"Future timestamp not allowed: {timestamp.isoformat()} "
            f"is later than {now.isoformat()}"
        )


class InvalidTimeOrderError(ValidationError):
    def __init__(self, clock_in: datetime, clock_out: datetime) -> None:
        self.clock_in = clock_in
        self.clock_out = clock_out
        super().__init__(
            f"Clock-out time {clock_out.isoformat()} is before "
            f"clock-in time {clock_in.isoformat()}"
        )


class EmployeeNotFoundError(AttendanceError):
    def __init__(self, employee_id: str) -> None:
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


class DatabaseError(AttendanceError):
    """Any storage-layer failure: connectivity, constraint, serialization."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Database error: {cause}")
