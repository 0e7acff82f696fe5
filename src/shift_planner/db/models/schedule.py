from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shift_planner.db.base import Base

if TYPE_CHECKING:
    from shift_planner.db.models.roster import Employee, ShiftType


class ScheduleMonth(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[str] = mapped_column(String(7), unique=True, index=True)  # Format YYYY-MM
    status: Mapped[str] = mapped_column(String(32), default="draft")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), nullable=False)

    assignments: Mapped[list["Assignment"]] = relationship(
        back_populates="schedule_month", cascade="all, delete-orphan"
    )


class Assignment(Base):
    __table_args__ = (
        UniqueConstraint("schedule_month_id", "employee_id", "date", name="ux_assignment_employee_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    schedule_month_id: Mapped[int] = mapped_column(
        ForeignKey("schedulemonth.id", ondelete="CASCADE"), index=True
    )
    employee_id: Mapped[int] = mapped_column(ForeignKey("employee.id", ondelete="CASCADE"), index=True)
    shift_type_id: Mapped[int] = mapped_column(ForeignKey("shifttype.id", ondelete="CASCADE"))
    date: Mapped[date] = mapped_column(Date, index=True)

    schedule_month: Mapped["ScheduleMonth"] = relationship(back_populates="assignments")
    employee: Mapped["Employee"] = relationship(back_populates="assignments")
    shift_type: Mapped["ShiftType"] = relationship()
