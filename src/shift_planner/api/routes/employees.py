from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shift_planner.db.session import get_db_session
from shift_planner.repositories import employee as employee_repo
from shift_planner.schemas.roster import (
    AvailabilityRead,
    AvailabilityUpsert,
    EmployeeCreate,
    EmployeeRead,
    EmployeeUpdate,
)

router = APIRouter()


@router.get("/", response_model=list[EmployeeRead])
async def list_employees(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[EmployeeRead]:
    employees = await employee_repo.list_employees(session)
    return [EmployeeRead.model_validate(employee) for employee in employees]


@router.post("/", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> EmployeeRead:
    employee = await employee_repo.create_employee(session, payload)
    await session.commit()
    await session.refresh(employee)
    return EmployeeRead.model_validate(employee)


@router.put("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> EmployeeRead:
    employee = await employee_repo.get_employee(session, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    employee = await employee_repo.update_employee(session, employee, payload)
    await session.commit()
    await session.refresh(employee)
    return EmployeeRead.model_validate(employee)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> None:
    employee = await employee_repo.get_employee(session, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    await employee_repo.delete_employee(session, employee)
    await session.commit()


@router.get("/{employee_id}/availabilities", response_model=list[AvailabilityRead])
async def list_availabilities(
    employee_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[AvailabilityRead]:
    employee = await employee_repo.get_employee(session, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    availabilities = await employee_repo.list_employee_availabilities(session, employee_id)
    return [AvailabilityRead.model_validate(item) for item in availabilities]


@router.put("/{employee_id}/availabilities", response_model=AvailabilityRead)
async def upsert_availability(
    employee_id: int,
    payload: AvailabilityUpsert,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AvailabilityRead:
    employee = await employee_repo.get_employee(session, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    availability = await employee_repo.upsert_availability(session, employee_id, payload)
    await session.commit()
    return AvailabilityRead.model_validate(availability)


@router.delete("/{employee_id}/availabilities/{availability_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(
    employee_id: int,
    availability_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> None:
    availability = await employee_repo.get_availability(session, employee_id, availability_id)
    if not availability:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Availability not found")
    await employee_repo.delete_availability(session, availability)
    await session.commit()
