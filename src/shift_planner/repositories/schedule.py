from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_planner.db.models.schedule import Assignment, ScheduleMonth
from shift_planner.schemas.schedule import ScheduleMonthCreate, ScheduleMonthUpdate
from shift_planner.services.scheduler import GeneratedAssignment


async def list_months(session: AsyncSession) -> list[ScheduleMonth]:
    result = await session.execute(select(ScheduleMonth).order_by(ScheduleMonth.month.desc()))
    return list(result.scalars().all())


async def get_month(session: AsyncSession, month_id: int) -> ScheduleMonth | None:
    return await session.get(ScheduleMonth, month_id)


async def get_month_by_label(session: AsyncSession, month: str) -> ScheduleMonth | None:
    result = await session.execute(select(ScheduleMonth).where(ScheduleMonth.month == month))
    return result.scalars().first()


async def create_month(session: AsyncSession, payload: ScheduleMonthCreate) -> ScheduleMonth:
    schedule_month = ScheduleMonth(month=payload.month, status=payload.status)
    session.add(schedule_month)
    await session.flush()
    await session.refresh(schedule_month)
    return schedule_month


async def update_month(
    session: AsyncSession, schedule_month: ScheduleMonth, payload: ScheduleMonthUpdate
) -> ScheduleMonth:
    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(schedule_month, field, value)
    await session.flush()
    await session.refresh(schedule_month)
    return schedule_month


async def delete_month(session: AsyncSession, schedule_month: ScheduleMonth) -> None:
    await session.delete(schedule_month)


async def list_assignments(session: AsyncSession, month_id: int) -> list[Assignment]:
    result = await session.execute(
        select(Assignment)
        .where(Assignment.schedule_month_id == month_id)
        .order_by(Assignment.date.asc(), Assignment.id.asc())
    )
    return list(result.scalars().all())


async def get_assignment(session: AsyncSession, month_id: int, assignment_id: int) -> Assignment | None:
    assignment = await session.get(Assignment, assignment_id)
    if assignment and assignment.schedule_month_id == month_id:
        return assignment
    return None


async def delete_assignment(session: AsyncSession, assignment: Assignment) -> None:
    await session.delete(assignment)


async def replace_assignments(
    session: AsyncSession,
    schedule_month: ScheduleMonth,
    generated: list[GeneratedAssignment],
) -> list[Assignment]:
    """Drop every stored assignment of the month and store *generated* instead."""

    await session.execute(delete(Assignment).where(Assignment.schedule_month_id == schedule_month.id))

    assignments = [
        Assignment(
            schedule_month_id=schedule_month.id,
            employee_id=item.employee_id,
            shift_type_id=item.shift_type_id,
            date=date.fromisoformat(item.date),
        )
        for item in generated
    ]
    session.add_all(assignments)
    await session.flush()
    return assignments
