"""
FastAPI dependencies — database session and attendance repository.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.db.session import async_session_factory
from timeclock.repositories.attendance import (AttendanceRepository,
                                               SqlAlchemyAttendanceRepository)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Repositories ────────────────────────────────────────────────────
async def get_attendance_repository(
    db: AsyncSession = Depends(get_db),
) -> AttendanceRepository:
    return SqlAlchemyAttendanceRepository(db)
