"""
Attendance endpoints — clock-in.

The handler only translates between JSON and the workflow; every rule
lives in ``timeclock.workflows.clock_in``. Workflow errors propagate to
the ``AttendanceError`` handler in ``timeclock.core.exceptions``, which
answers 400 with ``{"success": false, "error": ...}``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from timeclock.api.v1.deps import get_attendance_repository
from timeclock.repositories.attendance import AttendanceRepository
from timeclock.schemas.attendance import (ClockInRequest, ClockInResponse,
                                          ErrorResponse)
from timeclock.workflows.clock_in import ClockInCommand, execute_clock_in

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post(
    "/clock-in",
    response_model=ClockInResponse,
    responses={400: {"model": ErrorResponse}},
)
async def clock_in(
    body: ClockInRequest,
    repository: AttendanceRepository = Depends(get_attendance_repository),
) -> ClockInResponse:
    """Record a clock-in, merging into an existing row for the same work date."""
    event = await execute_clock_in(
        ClockInCommand(employee_id=body.employee_id, timestamp=body.timestamp),
        repository,
    )
    record = event.record
    return ClockInResponse(
        success=True,
        employee_id=record.employee_id.value,
        clock_in_time=record.clock_in.isoformat(),  # type: ignore[union-attr]
    )
