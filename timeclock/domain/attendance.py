"""
Attendance domain values — employee identity, clock times, work dates
and the per-day attendance record.

All types are immutable and validate themselves on construction, so any
instance that exists is a legal value. The ``create`` / ``derive`` /
``assemble`` class methods are the named entry points used by the
workflow; direct construction is kept for rebuilding stored rows.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum

from timeclock.domain.errors import (EmptyEmployeeIdError,
                                     FutureTimestampError,
                                     InvalidTimeOrderError,
                                     InvalidTimestampError)

# Date and time with seconds; ClockTime reports a missing offset.
_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})?"
)


# ── Employee identity ───────────────────────────────────────────────
@dataclass(frozen=True)
class EmployeeId:
    """Public employee identifier. No trimming, no case folding."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise EmptyEmployeeIdError()

    @classmethod
    def create(cls, value: str) -> EmployeeId:
        return cls(value)

    def __str__(self) -> str:
        return self.value


# ── Clock time ──────────────────────────────────────────────────────
@dataclass(frozen=True, order=True)
class ClockTime:
    """A timezone-aware instant.

    Equality, hashing and ordering go through ``datetime``'s aware
    comparison, i.e. they compare instants: 09:00+09:00 == 00:00+00:00.
    The offset is kept only for display and work-date derivation.
    """

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None or self.value.utcoffset() is None:
            raise InvalidTimestampError(self.value.isoformat(), "missing UTC offset")
        try:
            self.value.astimezone(timezone.utc)
        except OverflowError:
            raise InvalidTimestampError(self.value.isoformat(), "out of range") from None

    @classmethod
    def create(cls, timestamp: datetime, *, now: datetime | None = None) -> ClockTime:
        """Validate ``timestamp`` against the current time in its own offset."""
        clock_time = cls(timestamp)
        now = (now or datetime.now(timestamp.tzinfo)).astimezone(timestamp.tzinfo)
        if timestamp > now:
            raise FutureTimestampError(timestamp, now)
        return clock_time

    @classmethod
    def parse(cls, text: str, *, now: datetime | None = None) -> ClockTime:
        """Parse an RFC 3339 timestamp (``Z`` or ``±HH:MM``) and validate it."""
        if not isinstance(text, str) or not _RFC3339.fullmatch(text):
            raise InvalidTimestampError(text, "not an RFC 3339 timestamp")
        try:
            timestamp = datetime.fromisoformat(text.upper())
        except (TypeError, ValueError) as exc:
            raise InvalidTimestampError(text, "not an RFC 3339 timestamp") from exc
        return cls.create(timestamp, now=now)

    def isoformat(self) -> str:
        return self.value.isoformat()


# ── Work date ───────────────────────────────────────────────────────
@dataclass(frozen=True, order=True)
class WorkDate:
    """Calendar date a clock-in/out pair is attributed to."""

    value: date

    @classmethod
    def derive(cls, clock_time: ClockTime) -> WorkDate:
        # Date in the clock time's own offset, never converted to UTC first.
        return cls(clock_time.value.date())

    def isoformat(self) -> str:
        return self.value.isoformat()


# ── Status ──────────────────────────────────────────────────────────
class AttendanceStatus(str, Enum):
    """Stored status of an attendance row."""

    WORKING = "working"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


def derive_status(clock_in: object | None, clock_out: object | None) -> AttendanceStatus:
    """Status from which times are present.

    The SQL upsert mirrors this rule in its conflict clause; the two must
    stay in step.
    """
    if clock_in is not None and clock_out is not None:
        return AttendanceStatus.COMPLETED
    if clock_in is not None:
        return AttendanceStatus.WORKING
    return AttendanceStatus.INCOMPLETE


# ── Attendance record ───────────────────────────────────────────────
@dataclass(frozen=True)
class AttendanceRecord:
    employee_id: EmployeeId
    work_date: WorkDate
    clock_in: ClockTime | None = None
    clock_out: ClockTime | None = None

    def __post_init__(self) -> None:
        if (
            self.clock_in is not None
            and self.clock_out is not None
            and self.clock_out < self.clock_in
        ):
            raise InvalidTimeOrderError(self.clock_in.value, self.clock_out.value)

    @classmethod
    def assemble(
        cls,
        employee_id: EmployeeId,
        work_date: WorkDate,
        clock_in: ClockTime | None = None,
        clock_out: ClockTime | None = None,
    ) -> AttendanceRecord:
        return cls(employee_id, work_date, clock_in, clock_out)

    def with_clock_out(self, clock_out: ClockTime) -> AttendanceRecord:
        """Return a copy carrying ``clock_out``; the work date is unchanged."""
        return dataclasses.replace(self, clock_out=clock_out)

    @property
    def status(self) -> AttendanceStatus:
        return derive_status(self.clock_in, self.clock_out)
