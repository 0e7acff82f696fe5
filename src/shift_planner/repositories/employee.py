from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_planner.db.models.roster import Availability, Employee
from shift_planner.schemas.roster import AvailabilityUpsert, EmployeeCreate, EmployeeUpdate


async def list_employees(session: AsyncSession) -> list[Employee]:
    result = await session.execute(select(Employee).order_by(Employee.name.asc(), Employee.id.asc()))
    return list(result.scalars().all())


async def create_employee(session: AsyncSession, payload: EmployeeCreate) -> Employee:
    employee = Employee(**payload.model_dump())
    session.add(employee)
    await session.flush()
    await session.refresh(employee)
    return employee


async def get_employee(session: AsyncSession, employee_id: int) -> Employee | None:
    return await session.get(Employee, employee_id)


async def update_employee(
    session: AsyncSession, employee: Employee, payload: EmployeeUpdate
) -> Employee:
    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(employee, field, value)
    await session.flush()
    await session.refresh(employee)
    return employee


async def delete_employee(session: AsyncSession, employee: Employee) -> None:
    await session.delete(employee)


async def list_employee_availabilities(session: AsyncSession, employee_id: int) -> list[Availability]:
    result = await session.execute(
        select(Availability)
        .where(Availability.employee_id == employee_id)
        .order_by(Availability.date.asc())
    )
    return list(result.scalars().all())


async def list_unavailabilities_between(
    session: AsyncSession, start: date, end: date
) -> list[Availability]:
    result = await session.execute(
        select(Availability).where(
            Availability.is_unavailable.is_(True),
            Availability.date >= start,
            Availability.date <= end,
        )
    )
    return list(result.scalars().all())


async def upsert_availability(
    session: AsyncSession, employee_id: int, payload: AvailabilityUpsert
) -> Availability:
    result = await session.execute(
        select(Availability).where(
            Availability.employee_id == employee_id,
            Availability.date == payload.date,
        )
    )
    availability = result.scalars().first()
    if availability is None:
        availability = Availability(employee_id=employee_id, **payload.model_dump())
        session.add(availability)
    else:
        availability.is_unavailable = payload.is_unavailable
    await session.flush()
    await session.refresh(availability)
    return availability


async def get_availability(
    session: AsyncSession, employee_id: int, availability_id: int
) -> Availability | None:
    availability = await session.get(Availability, availability_id)
    if availability and availability.employee_id == employee_id:
        return availability
    return None


async def delete_availability(session: AsyncSession, availability: Availability) -> None:
    await session.delete(availability)
