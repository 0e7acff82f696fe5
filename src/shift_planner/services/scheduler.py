from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Iterator, Mapping, Sequence, Union

from shift_planner.services.rules import RuleSet, StreakRules, load_default_rules

logger = logging.getLogger(__name__)

EntityId = Union[int, str]


@dataclass(frozen=True)
class SchedulingEmployee:
    id: EntityId
    name: str = ""
    max_shifts_per_month: int | None = None


@dataclass(frozen=True)
class SchedulingShiftType:
    id: EntityId
    required_count: int = 1
    is_closing: bool = False
    label: str = ""
    start_time: str | None = None
    end_time: str | None = None


@dataclass(frozen=True)
class UnavailabilityRecord:
    employee_id: EntityId
    date: date | str
    is_unavailable: bool = True


@dataclass(frozen=True)
class GeneratedAssignment:
    employee_id: EntityId
    date: str
    shift_type_id: EntityId


@dataclass
class EmployeeRunState:
    total_assigned: int = 0
    closing_assigned: int = 0
    current_streak: int = 0
    rest_days_remaining: int = 0

    @property
    def is_resting(self) -> bool:
        return self.rest_days_remaining > 0


class MonthCalendar:
    """Re-iterable view over the date keys of one calendar month."""

    def __init__(self, year: int, month: int) -> None:
        self.year = year
        self.month = month

    def __iter__(self) -> Iterator[str]:
        return iter_month_dates(self.year, self.month)

    def __len__(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]


def iter_month_dates(year: int, month: int) -> Iterator[str]:
    """Yield ``YYYY-MM-DD`` keys for every day of *month* in ascending order."""

    last_day = calendar.monthrange(year, month)[1]
    for day in range(1, last_day + 1):
        yield date(year, month, day).isoformat()


def date_key(value: date | str) -> str:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def build_unavailability_index(
    availabilities: Iterable[UnavailabilityRecord],
) -> set[tuple[EntityId, str]]:
    return {
        (record.employee_id, date_key(record.date))
        for record in availabilities
        if record.is_unavailable
    }


def _is_eligible(
    employee: SchedulingEmployee,
    day: str,
    unavailable: set[tuple[EntityId, str]],
    assigned_today: set[EntityId],
    state: EmployeeRunState,
) -> bool:
    if (employee.id, day) in unavailable:
        return False
    if employee.id in assigned_today:
        return False
    cap = employee.max_shifts_per_month
    if cap is not None and state.total_assigned >= cap:
        return False
    return not state.is_resting


def eligible_employees(
    day: str,
    employees: Sequence[SchedulingEmployee],
    unavailable: set[tuple[EntityId, str]],
    assigned_today: set[EntityId],
    states: Mapping[EntityId, EmployeeRunState],
) -> list[SchedulingEmployee]:
    """Return the employees that may take one more shift on *day*."""

    return [
        employee
        for employee in employees
        if _is_eligible(employee, day, unavailable, assigned_today, states[employee.id])
    ]


def rank_by_fairness(
    candidates: Sequence[SchedulingEmployee],
    states: Mapping[EntityId, EmployeeRunState],
    *,
    is_closing: bool,
) -> list[SchedulingEmployee]:
    """
    Order candidates so the least loaded come first.

    Closing shifts balance on the closing count, every other shift on the
    total count. ``sorted`` is stable, so ties keep roster order.
    """

    if is_closing:
        return sorted(candidates, key=lambda employee: states[employee.id].closing_assigned)
    return sorted(candidates, key=lambda employee: states[employee.id].total_assigned)


def advance_streaks(
    states: Mapping[EntityId, EmployeeRunState],
    worked_today: set[EntityId],
    streak_rules: StreakRules,
) -> list[EntityId]:
    """
    Move every employee one date forward in the streak state machine.

    Returns the ids of employees that start a forced rest after this date.
    """

    started_rest: list[EntityId] = []
    for employee_id, state in states.items():
        if state.is_resting:
            state.rest_days_remaining -= 1
            if not state.is_resting:
                state.current_streak = 0
            continue

        if employee_id not in worked_today:
            state.current_streak = 0
            continue

        state.current_streak += 1
        if state.current_streak >= streak_rules.max_consecutive_working_days:
            state.current_streak = 0
            state.rest_days_remaining = streak_rules.forced_rest_days
            started_rest.append(employee_id)
    return started_rest


def generate_schedule(
    employees: Sequence[SchedulingEmployee],
    shift_types: Sequence[SchedulingShiftType],
    year: int,
    month: int,
    availabilities: Iterable[UnavailabilityRecord],
    *,
    rules: RuleSet | None = None,
) -> list[GeneratedAssignment]:
    """
    Greedy single pass over the month that fills each shift occurrence with the
    least loaded eligible employees.

    Shift types are processed in the order given. Occurrences without enough
    eligible employees stay understaffed; nothing is raised.
    """

    rule_set = rules or load_default_rules()
    streak_rules = rule_set.rules.streaks
    unavailable = build_unavailability_index(availabilities)
    states: dict[EntityId, EmployeeRunState] = {employee.id: EmployeeRunState() for employee in employees}

    assignments: list[GeneratedAssignment] = []
    understaffed = 0

    for day in iter_month_dates(year, month):
        assigned_today: set[EntityId] = set()

        for shift in shift_types:
            candidates = eligible_employees(day, employees, unavailable, assigned_today, states)
            chosen = rank_by_fairness(candidates, states, is_closing=shift.is_closing)[: shift.required_count]

            for employee in chosen:
                assignments.append(
                    GeneratedAssignment(employee_id=employee.id, date=day, shift_type_id=shift.id)
                )
                assigned_today.add(employee.id)
                state = states[employee.id]
                state.total_assigned += 1
                if shift.is_closing:
                    state.closing_assigned += 1

            if len(chosen) < shift.required_count:
                understaffed += 1
                logger.debug(
                    "Shift %s on %s understaffed: %d of %d",
                    shift.id,
                    day,
                    len(chosen),
                    shift.required_count,
                )

        resting = advance_streaks(states, assigned_today, streak_rules)
        if resting:
            logger.debug("Forced rest starts after %s for %s", day, resting)

    logger.info(
        "Generated %d assignments for %04d-%02d (%d understaffed occurrences)",
        len(assignments),
        year,
        month,
        understaffed,
    )
    return assignments


__all__ = [
    "EmployeeRunState",
    "EntityId",
    "GeneratedAssignment",
    "MonthCalendar",
    "SchedulingEmployee",
    "SchedulingShiftType",
    "UnavailabilityRecord",
    "advance_streaks",
    "build_unavailability_index",
    "date_key",
    "eligible_employees",
    "generate_schedule",
    "iter_month_dates",
    "rank_by_fairness",
]
