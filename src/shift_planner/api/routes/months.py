import calendar
import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shift_planner.db.models.roster import Availability, Employee, ShiftType
from shift_planner.db.models.schedule import Assignment, ScheduleMonth
from shift_planner.db.session import get_db_session
from shift_planner.repositories import employee as employee_repo
from shift_planner.repositories import schedule as schedule_repo
from shift_planner.repositories import shift_type as shift_type_repo
from shift_planner.schemas.schedule import (
    AssignmentRead,
    EmployeeBalance,
    ScheduleGenerationResponse,
    ScheduleMonthCreate,
    ScheduleMonthRead,
    ScheduleMonthUpdate,
    ScheduleStatistics,
    ScheduleViolationRead,
)
from shift_planner.services.diagnostics import ClosingBalance, ScheduleViolation, summarize_closing_balance
from shift_planner.services.planning import SchedulingContext, parse_month, plan_month
from shift_planner.services.rules import load_default_rules
from shift_planner.services.scheduler import (
    GeneratedAssignment,
    SchedulingEmployee,
    SchedulingShiftType,
    UnavailabilityRecord,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _month_bounds(month: str) -> tuple[date, date]:
    year, month_num = parse_month(month)
    last = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last)


def _to_scheduling_employee(employee: Employee) -> SchedulingEmployee:
    return SchedulingEmployee(
        id=employee.id,
        name=employee.name,
        max_shifts_per_month=employee.max_shifts_per_month,
    )


def _to_scheduling_shift_type(shift_type: ShiftType) -> SchedulingShiftType:
    return SchedulingShiftType(
        id=shift_type.id,
        required_count=shift_type.required_count,
        is_closing=shift_type.is_closing,
        label=shift_type.label,
        start_time=shift_type.start_time,
        end_time=shift_type.end_time,
    )


def _to_unavailability(record: Availability) -> UnavailabilityRecord:
    return UnavailabilityRecord(
        employee_id=record.employee_id,
        date=record.date,
        is_unavailable=record.is_unavailable,
    )


def _to_generated(assignment: Assignment) -> GeneratedAssignment:
    return GeneratedAssignment(
        employee_id=assignment.employee_id,
        date=assignment.date.isoformat(),
        shift_type_id=assignment.shift_type_id,
    )


def _map_violation(violation: ScheduleViolation) -> ScheduleViolationRead:
    return ScheduleViolationRead(
        code=violation.code,
        message=violation.message,
        severity=violation.severity,
        scope=violation.scope,
        date=violation.date,
        employee_id=violation.employee_id,
        shift_type_id=violation.shift_type_id,
        meta=violation.meta,
    )


def _build_statistics(month: str, employees: list[Employee], balance: ClosingBalance) -> ScheduleStatistics:
    flagged = set(balance.flagged_employee_ids)
    items = [
        EmployeeBalance(
            employee_id=employee.id,
            employee_name=employee.name,
            closing_count=balance.closing_counts.get(employee.id, 0),
            total_count=balance.total_counts.get(employee.id, 0),
            is_flagged=employee.id in flagged,
        )
        for employee in employees
    ]
    items.sort(key=lambda item: (-item.closing_count, item.employee_name))
    return ScheduleStatistics(
        month=month,
        max_closing=balance.max_closing,
        min_closing=balance.min_closing,
        closing_spread=balance.spread,
        employees=items,
    )


async def _get_month_or_404(session: AsyncSession, month_id: int) -> ScheduleMonth:
    schedule_month = await schedule_repo.get_month(session, month_id)
    if not schedule_month:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule month not found")
    return schedule_month


@router.get("/", response_model=list[ScheduleMonthRead])
async def list_months(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[ScheduleMonthRead]:
    months = await schedule_repo.list_months(session)
    return [ScheduleMonthRead.model_validate(item) for item in months]


@router.post("/", response_model=ScheduleMonthRead, status_code=status.HTTP_201_CREATED)
async def create_month(
    payload: ScheduleMonthCreate, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> ScheduleMonthRead:
    if await schedule_repo.get_month_by_label(session, payload.month):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Schedule month already exists")
    schedule_month = await schedule_repo.create_month(session, payload)
    await session.commit()
    return ScheduleMonthRead.model_validate(schedule_month)


@router.put("/{month_id}", response_model=ScheduleMonthRead)
async def update_month(
    month_id: int,
    payload: ScheduleMonthUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ScheduleMonthRead:
    schedule_month = await _get_month_or_404(session, month_id)
    schedule_month = await schedule_repo.update_month(session, schedule_month, payload)
    await session.commit()
    return ScheduleMonthRead.model_validate(schedule_month)


@router.delete("/{month_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_month(
    month_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> None:
    schedule_month = await _get_month_or_404(session, month_id)
    await schedule_repo.delete_month(session, schedule_month)
    await session.commit()


@router.post("/{month_id}/generate", response_model=ScheduleGenerationResponse)
async def generate_month(
    month_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> ScheduleGenerationResponse:
    schedule_month = await _get_month_or_404(session, month_id)
    start, end = _month_bounds(schedule_month.month)

    employees = await employee_repo.list_employees(session)
    shift_types = await shift_type_repo.list_shift_types(session)
    unavailabilities = await employee_repo.list_unavailabilities_between(session, start, end)

    logger.info(
        "Generating %s with %d employees, %d shift types, %d unavailability records",
        schedule_month.month,
        len(employees),
        len(shift_types),
        len(unavailabilities),
    )
    context = SchedulingContext(
        month=schedule_month.month,
        employees=[_to_scheduling_employee(employee) for employee in employees],
        shift_types=[_to_scheduling_shift_type(shift_type) for shift_type in shift_types],
        availabilities=[_to_unavailability(record) for record in unavailabilities],
        rules=load_default_rules(),
    )
    result = plan_month(context)

    stored = await schedule_repo.replace_assignments(session, schedule_month, result.assignments)
    await session.commit()

    return ScheduleGenerationResponse(
        month=schedule_month.month,
        assignments=[AssignmentRead.model_validate(item) for item in stored],
        violations=[_map_violation(violation) for violation in result.violations],
        statistics=_build_statistics(schedule_month.month, employees, result.balance),
    )


@router.get("/{month_id}/assignments", response_model=list[AssignmentRead])
async def list_assignments(
    month_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[AssignmentRead]:
    await _get_month_or_404(session, month_id)
    assignments = await schedule_repo.list_assignments(session, month_id)
    return [AssignmentRead.model_validate(item) for item in assignments]


@router.delete("/{month_id}/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    month_id: int,
    assignment_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> None:
    assignment = await schedule_repo.get_assignment(session, month_id, assignment_id)
    if not assignment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    await schedule_repo.delete_assignment(session, assignment)
    await session.commit()


@router.get("/{month_id}/statistics", response_model=ScheduleStatistics)
async def month_statistics(
    month_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> ScheduleStatistics:
    schedule_month = await _get_month_or_404(session, month_id)
    employees = await employee_repo.list_employees(session)
    shift_types = await shift_type_repo.list_shift_types(session)
    assignments = await schedule_repo.list_assignments(session, month_id)

    balance = summarize_closing_balance(
        [_to_scheduling_employee(employee) for employee in employees],
        [_to_scheduling_shift_type(shift_type) for shift_type in shift_types],
        [_to_generated(item) for item in assignments],
        load_default_rules(),
    )
    return _build_statistics(schedule_month.month, employees, balance)
