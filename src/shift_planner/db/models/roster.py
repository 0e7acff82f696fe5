from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shift_planner.db.base import Base

if TYPE_CHECKING:
    from shift_planner.db.models.schedule import Assignment


class Employee(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    max_shifts_per_month: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), nullable=False)

    availabilities: Mapped[list["Availability"]] = relationship(
        back_populates="employee", cascade="all, delete-orphan"
    )
    assignments: Mapped[list["Assignment"]] = relationship(
        back_populates="employee", cascade="all, delete-orphan"
    )


class ShiftType(Base):
    __table_args__ = (CheckConstraint("required_count >= 1", name="ck_shifttype_required_count"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    label: Mapped[str] = mapped_column(String(120), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    required_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_closing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), nullable=False)


class Availability(Base):
    __table_args__ = (UniqueConstraint("employee_id", "date", name="ux_availability_employee_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employee.id", ondelete="CASCADE"), index=True)
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    is_unavailable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    employee: Mapped[Employee] = relationship(back_populates="availabilities")
