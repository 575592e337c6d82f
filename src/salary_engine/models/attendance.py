"""Attendance rows written by the check-in/check-out system (read-only here)."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from salary_engine.calculators.types import AttendanceRecord
from salary_engine.models.base import Base, TimestampMixin


class Attendance(Base, TimestampMixin):
    """One staff member's attendance for one work date."""

    __tablename__ = "attendances"

    attendance_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    staff_id: Mapped[str] = mapped_column(String(64), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    scheduled_check_in: Mapped[datetime | None]
    scheduled_check_out: Mapped[datetime | None]
    actual_check_in: Mapped[datetime | None]
    actual_check_out: Mapped[datetime | None]
    break_minutes: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="NORMAL")

    __table_args__ = (
        UniqueConstraint("staff_id", "work_date", name="attendances_staff_date_unique"),
        Index("attendances_staff_date_idx", "staff_id", "work_date"),
    )

    def to_record(self) -> AttendanceRecord:
        return AttendanceRecord(
            work_date=self.work_date,
            actual_check_in=self.actual_check_in,
            actual_check_out=self.actual_check_out,
            scheduled_check_in=self.scheduled_check_in,
            scheduled_check_out=self.scheduled_check_out,
            break_minutes=self.break_minutes,
            status=self.status,
        )
