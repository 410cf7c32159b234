"""
Clock-in workflow.

Received command → validated record → persisted record → event. Each step
raises on failure and nothing after it runs, so a rejected clock-in never
reaches the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from timeclock.domain.attendance import (AttendanceRecord, ClockTime,
                                         EmployeeId, WorkDate)
from timeclock.repositories.attendance import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockInCommand:
    """Raw, unvalidated clock-in request."""

    employee_id: str
    timestamp: str  # RFC 3339 with offset


@dataclass(frozen=True)
class ClockInSucceeded:
    record: AttendanceRecord


async def execute_clock_in(
    command: ClockInCommand,
    repository: AttendanceRepository,
    *,
    now: datetime | None = None,
) -> ClockInSucceeded:
    """Validate ``command``, upsert the clock-in and return the stored record.

    Raises the ``AttendanceError`` subclass of the first failing step;
    repository errors (``EmployeeNotFoundError``, ``DatabaseError``) pass
    through unchanged.
    """
    employee_id = EmployeeId.create(command.employee_id)
    clock_in = ClockTime.parse(command.timestamp, now=now)
    work_date = WorkDate.derive(clock_in)
    record = AttendanceRecord.assemble(employee_id, work_date, clock_in=clock_in)

    saved = await repository.upsert(record)

    logger.info(
        "Clock-in recorded for %s on %s at %s",
        saved.employee_id,
        saved.work_date.isoformat(),
        clock_in.isoformat(),
    )
    return ClockInSucceeded(record=saved)
