"""Evaluate generated or hand-edited schedules so callers can surface problems."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Literal, Sequence

from shift_planner.services.rules import RuleSet
from shift_planner.services.scheduler import (
    EntityId,
    GeneratedAssignment,
    SchedulingEmployee,
    SchedulingShiftType,
    UnavailabilityRecord,
    build_unavailability_index,
    iter_month_dates,
)


@dataclass
class ScheduleViolation:
    code: str
    message: str
    severity: Literal["info", "warning", "critical"] = "warning"
    scope: Literal["schedule", "day", "employee"] = "schedule"
    date: str | None = None
    employee_id: EntityId | None = None
    shift_type_id: EntityId | None = None
    meta: dict[str, str | int | float] = field(default_factory=dict)


@dataclass
class ClosingBalance:
    closing_counts: dict[EntityId, int]
    total_counts: dict[EntityId, int]
    max_closing: int
    min_closing: int
    flagged_employee_ids: list[EntityId] = field(default_factory=list)

    @property
    def spread(self) -> int:
        return self.max_closing - self.min_closing


def summarize_closing_balance(
    employees: Sequence[SchedulingEmployee],
    shift_types: Sequence[SchedulingShiftType],
    assignments: Iterable[GeneratedAssignment],
    rules: RuleSet,
) -> ClosingBalance:
    """
    Count closing and total shifts per employee.

    When the closing spread exceeds the configured tolerance the employees
    carrying the maximum are flagged.
    """

    closing_ids = {shift.id for shift in shift_types if shift.is_closing}
    closing_counts: dict[EntityId, int] = {employee.id: 0 for employee in employees}
    total_counts: dict[EntityId, int] = {employee.id: 0 for employee in employees}

    for assignment in assignments:
        total_counts[assignment.employee_id] = total_counts.get(assignment.employee_id, 0) + 1
        if assignment.shift_type_id in closing_ids:
            closing_counts[assignment.employee_id] = closing_counts.get(assignment.employee_id, 0) + 1

    max_closing = max(closing_counts.values(), default=0)
    min_closing = min(closing_counts.values(), default=0)
    flagged: list[EntityId] = []
    if max_closing - min_closing > rules.rules.fairness.closing_spread_tolerance:
        flagged = [employee_id for employee_id, count in closing_counts.items() if count == max_closing]

    return ClosingBalance(
        closing_counts=closing_counts,
        total_counts=total_counts,
        max_closing=max_closing,
        min_closing=min_closing,
        flagged_employee_ids=flagged,
    )


def evaluate_schedule(
    employees: Sequence[SchedulingEmployee],
    shift_types: Sequence[SchedulingShiftType],
    year: int,
    month: int,
    availabilities: Iterable[UnavailabilityRecord],
    assignments: Sequence[GeneratedAssignment],
    rules: RuleSet,
) -> list[ScheduleViolation]:
    """Evaluate staffing and working-time rule families for one month."""

    violations: list[ScheduleViolation] = []

    if not assignments:
        violations.append(
            ScheduleViolation(
                code="empty-schedule",
                message="No assignments were generated for the requested month.",
                severity="warning",
                scope="schedule",
            )
        )
        if not employees or not shift_types:
            return violations

    _apply_staffing_rules(shift_types, year, month, assignments, violations)
    _apply_employee_rules(employees, availabilities, assignments, rules, violations)
    return violations


def _apply_staffing_rules(
    shift_types: Sequence[SchedulingShiftType],
    year: int,
    month: int,
    assignments: Sequence[GeneratedAssignment],
    violations: list[ScheduleViolation],
) -> None:
    occurrence_totals: dict[tuple[str, EntityId], int] = defaultdict(int)
    for assignment in assignments:
        occurrence_totals[(assignment.date, assignment.shift_type_id)] += 1

    for day in iter_month_dates(year, month):
        for shift in shift_types:
            assigned = occurrence_totals.get((day, shift.id), 0)
            if assigned >= shift.required_count:
                continue
            violations.append(
                ScheduleViolation(
                    code="understaffed-shift",
                    message=f"Only {assigned} of {shift.required_count} employees assigned to "
                    f"{shift.label or shift.id} on {day}.",
                    severity="warning",
                    scope="day",
                    date=day,
                    shift_type_id=shift.id,
                    meta={"date": day, "assigned": assigned, "required": shift.required_count},
                )
            )


def _apply_employee_rules(
    employees: Sequence[SchedulingEmployee],
    availabilities: Iterable[UnavailabilityRecord],
    assignments: Sequence[GeneratedAssignment],
    rules: RuleSet,
    violations: list[ScheduleViolation],
) -> None:
    streak_rules = rules.rules.streaks
    unavailable = build_unavailability_index(availabilities)

    per_employee_dates: dict[EntityId, list[str]] = defaultdict(list)
    for assignment in assignments:
        per_employee_dates[assignment.employee_id].append(assignment.date)

    for employee in employees:
        dates = per_employee_dates.get(employee.id, [])
        if not dates:
            violations.append(
                ScheduleViolation(
                    code="unassigned-employee",
                    message=f"{employee.name or employee.id} has no assignments this month.",
                    severity="info",
                    scope="employee",
                    employee_id=employee.id,
                )
            )
            continue

        seen: set[str] = set()
        for day in dates:
            if day in seen:
                violations.append(
                    ScheduleViolation(
                        code="double-booking",
                        message=f"{employee.name or employee.id} is assigned more than once on {day}.",
                        severity="critical",
                        scope="day",
                        date=day,
                        employee_id=employee.id,
                    )
                )
            seen.add(day)
            if (employee.id, day) in unavailable:
                violations.append(
                    ScheduleViolation(
                        code="unavailable-assignment",
                        message=f"{employee.name or employee.id} is assigned on {day} despite being unavailable.",
                        severity="critical",
                        scope="day",
                        date=day,
                        employee_id=employee.id,
                    )
                )

        cap = employee.max_shifts_per_month
        if cap is not None and len(dates) > cap:
            violations.append(
                ScheduleViolation(
                    code="monthly-cap-exceeded",
                    message=f"{employee.name or employee.id} has {len(dates)} shifts; cap is {cap}.",
                    severity="critical",
                    scope="employee",
                    employee_id=employee.id,
                    meta={"assigned": len(dates), "cap": cap},
                )
            )

        worked = sorted(date.fromisoformat(day) for day in seen)
        runs = _consecutive_runs(worked)
        longest = max((length for _start, length in runs), default=0)
        if longest > streak_rules.max_consecutive_working_days:
            violations.append(
                ScheduleViolation(
                    code="consecutive-days-exceeded",
                    message=f"{employee.name or employee.id} works {longest} consecutive days; "
                    f"limit is {streak_rules.max_consecutive_working_days}.",
                    severity="critical",
                    scope="employee",
                    employee_id=employee.id,
                    meta={"streak": longest},
                )
            )

        worked_set = set(worked)
        for start, length in runs:
            if length != streak_rules.max_consecutive_working_days:
                continue
            last = start + timedelta(days=length - 1)
            rest_window = [last + timedelta(days=offset) for offset in range(1, streak_rules.forced_rest_days + 1)]
            broken = [day for day in rest_window if day in worked_set]
            if broken:
                violations.append(
                    ScheduleViolation(
                        code="forced-rest-skipped",
                        message=f"{employee.name or employee.id} works on {broken[0].isoformat()} "
                        f"during forced rest after {last.isoformat()}.",
                        severity="critical",
                        scope="day",
                        date=broken[0].isoformat(),
                        employee_id=employee.id,
                    )
                )


def _consecutive_runs(sorted_dates: Sequence[date]) -> list[tuple[date, int]]:
    runs: list[tuple[date, int]] = []
    previous: date | None = None
    start: date | None = None
    length = 0

    for day in sorted_dates:
        if previous is not None and (day - previous).days == 1:
            length += 1
        else:
            if start is not None:
                runs.append((start, length))
            start = day
            length = 1
        previous = day
    if start is not None:
        runs.append((start, length))
    return runs


__all__ = ["ClosingBalance", "ScheduleViolation", "evaluate_schedule", "summarize_closing_balance"]
