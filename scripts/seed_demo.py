"""Seed a small roster and a draft month for local development.

Run this after applying Alembic migrations:

    python -m alembic upgrade head
    python scripts/seed_demo.py
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from shift_planner.core.config import get_settings
from shift_planner.core.logging_setup import configure_logging
from shift_planner.db.models.roster import Availability, Employee, ShiftType
from shift_planner.db.models.schedule import ScheduleMonth

logger = logging.getLogger(__name__)

DEMO_MONTH = "2026-03"


async def seed() -> None:
    settings = get_settings()
    configure_logging(settings)
    engine = create_async_engine(settings.database_url, future=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        existing_shift_types = await session.scalar(select(func.count(ShiftType.id)))
        if not existing_shift_types:
            session.add_all(
                [
                    ShiftType(label="Opening", start_time="12:00", end_time="15:00", required_count=1),
                    ShiftType(
                        label="Closing",
                        start_time="18:00",
                        end_time="23:00",
                        required_count=2,
                        is_closing=True,
                    ),
                ]
            )

        existing_employees = await session.scalar(select(func.count(Employee.id)))
        if not existing_employees:
            employees = _build_employees()
            session.add_all(employees)
            await session.flush()
            session.add_all(_build_unavailabilities(employees))

        month = await session.scalar(select(ScheduleMonth).where(ScheduleMonth.month == DEMO_MONTH))
        if month is None:
            session.add(ScheduleMonth(month=DEMO_MONTH, status="draft"))

        await session.commit()
        logger.info("Demo data ready for %s", DEMO_MONTH)

    await engine.dispose()


def _build_employees() -> list[Employee]:
    return [
        Employee(name="Alice Martin", email="alice@example.com"),
        Employee(name="Bruno Keller", email="bruno@example.com"),
        Employee(name="Chloe Dubois", max_shifts_per_month=12),
        Employee(name="David Rossi"),
        Employee(name="Elena Novak", max_shifts_per_month=8),
    ]


def _build_unavailabilities(employees: list[Employee]) -> list[Availability]:
    first, second = employees[0], employees[1]
    return [
        Availability(employee_id=first.id, date=date(2026, 3, 1), is_unavailable=True),
        Availability(employee_id=first.id, date=date(2026, 3, 14), is_unavailable=True),
        Availability(employee_id=second.id, date=date(2026, 3, 20), is_unavailable=True),
        Availability(employee_id=second.id, date=date(2026, 3, 21), is_unavailable=True),
    ]


def main() -> None:
    asyncio.run(seed())


if __name__ == "__main__":
    main()
