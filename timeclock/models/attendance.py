"""
Attendance model — one row per (employee, work date).

Rows are only ever written through the upsert in
``timeclock.repositories.attendance``; the unique constraint is the
conflict target that keeps concurrent clock-ins on a single row.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (Column, Date, DateTime, ForeignKey, Integer, String,
                        UniqueConstraint)
from sqlalchemy.orm import relationship

from timeclock.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="uq_attendance_emp_work_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    work_date: date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    clock_in_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    clock_out_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # working | completed | incomplete
    # Both set explicitly by the upsert; created_at is left alone on conflict.
    created_at: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    updated_at: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]

    employee = relationship("Employee", back_populates="attendance_records")
