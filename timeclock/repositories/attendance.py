"""
Attendance persistence — the repository port and its SQLAlchemy adapter.

The adapter writes with one ``INSERT ... ON CONFLICT (employee_id,
work_date) DO UPDATE ... RETURNING`` statement, so concurrent clock-ins for
the same employee and day collapse onto a single row without any
application-level locking.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Protocol

from sqlalchemy import and_, case, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.domain.attendance import (AttendanceRecord, AttendanceStatus,
                                         ClockTime, derive_status)
from timeclock.domain.errors import AttendanceError, DatabaseError, EmployeeNotFoundError
from timeclock.models.attendance import Attendance
from timeclock.models.employee import Employee

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class AttendanceRepository(Protocol):
    async def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or merge ``record`` and return the stored result.

        Raises ``EmployeeNotFoundError`` for an unknown employee and
        ``DatabaseError`` for any storage failure.
        """
        raise NotImplementedError


# ── Helpers ─────────────────────────────────────────────────────────
def _ensure_utc(dt: datetime) -> datetime:
    """Stored timestamps come back naive from SQLite; they were written in UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _to_utc(clock_time: ClockTime | None) -> datetime | None:
    if clock_time is None:
        return None
    return clock_time.value.astimezone(timezone.utc)


def _from_stored(dt: datetime | None, tz: tzinfo) -> ClockTime | None:
    if dt is None:
        return None
    stored = _ensure_utc(dt)
    try:
        return ClockTime(stored.astimezone(tz))
    except OverflowError:
        return ClockTime(stored)


def _reference_tz(record: AttendanceRecord) -> tzinfo:
    """Offset the merged row is reported in: the caller's own offset."""
    for clock_time in (record.clock_in, record.clock_out):
        if clock_time is not None:
            return clock_time.value.tzinfo  # type: ignore[return-value]
    return timezone.utc


def _status_expression(clock_in, clock_out):
    """SQL form of ``derive_status`` over the merged column values."""
    return case(
        (
            and_(clock_in.is_not(None), clock_out.is_not(None)),
            AttendanceStatus.COMPLETED.value,
        ),
        (clock_in.is_not(None), AttendanceStatus.WORKING.value),
        else_=AttendanceStatus.INCOMPLETE.value,
    )


# ── SQLAlchemy adapter ──────────────────────────────────────────────
class SqlAlchemyAttendanceRepository:
    """Upserts attendance rows through a request-scoped ``AsyncSession``."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _insert(self):
        dialect = self._session.bind.dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect](Attendance)
        except KeyError:
            raise DatabaseError(f"upsert not supported on dialect '{dialect}'") from None

    async def _employee_pk(self, employee_code: str) -> int:
        result = await self._session.execute(
            select(Employee.id).where(Employee.employee_code == employee_code)
        )
        employee_pk = result.scalar_one_or_none()
        if employee_pk is None:
            raise EmployeeNotFoundError(employee_code)
        return employee_pk

    async def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        try:
            return await self._upsert(record)
        except AttendanceError:
            await self._session.rollback()
            raise
        except (SQLAlchemyError, OSError) as exc:
            await self._session.rollback()
            logger.error("Attendance upsert failed for %s: %s", record.employee_id, exc)
            raise DatabaseError(str(exc)) from exc

    async def _upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        employee_pk = await self._employee_pk(record.employee_id.value)
        now = datetime.now(timezone.utc)

        stmt = self._insert().values(
            employee_id=employee_pk,
            work_date=record.work_date.value,
            clock_in_time=_to_utc(record.clock_in),
            clock_out_time=_to_utc(record.clock_out),
            status=derive_status(record.clock_in, record.clock_out).value,
            created_at=now,
            updated_at=now,
        )
        table = Attendance.__table__
        merged_in = func.coalesce(stmt.excluded.clock_in_time, table.c.clock_in_time)
        merged_out = func.coalesce(stmt.excluded.clock_out_time, table.c.clock_out_time)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.employee_id, table.c.work_date],
            set_={
                "clock_in_time": merged_in,
                "clock_out_time": merged_out,
                "status": _status_expression(merged_in, merged_out),
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(table.c.clock_in_time, table.c.clock_out_time, table.c.status)

        row = (await self._session.execute(stmt)).one()

        tz = _reference_tz(record)
        # Raises InvalidTimeOrderError before commit if the merge broke ordering.
        stored = AttendanceRecord.assemble(
            record.employee_id,
            record.work_date,
            clock_in=_from_stored(row.clock_in_time, tz),
            clock_out=_from_stored(row.clock_out_time, tz),
        )
        await self._session.commit()

        logger.info(
            "Upserted attendance for %s on %s (status=%s)",
            record.employee_id,
            record.work_date.isoformat(),
            row.status,
        )
        return stored
