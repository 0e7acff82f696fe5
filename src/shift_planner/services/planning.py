from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR

from shift_planner.services.diagnostics import (
    ClosingBalance,
    ScheduleViolation,
    evaluate_schedule,
    summarize_closing_balance,
)
from shift_planner.services.rules import RuleSet, load_default_rules
from shift_planner.services.scheduler import (
    GeneratedAssignment,
    SchedulingEmployee,
    SchedulingShiftType,
    UnavailabilityRecord,
    generate_schedule,
)


@dataclass
class SchedulingContext:
    month: str  # YYYY-MM
    employees: list[SchedulingEmployee]
    shift_types: list[SchedulingShiftType]
    availabilities: list[UnavailabilityRecord] = field(default_factory=list)
    rules: RuleSet = field(default_factory=load_default_rules)


@dataclass
class SchedulingResult:
    assignments: list[GeneratedAssignment]
    balance: ClosingBalance
    violations: list[ScheduleViolation] = field(default_factory=list)


_MONTH_PATTERN = re.compile(r"(\d{4})-(\d{1,2})")


def parse_month(month: str) -> tuple[int, int]:
    match = _MONTH_PATTERN.fullmatch(month)
    if match is None:
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    year, month_num = int(match.group(1)), int(match.group(2))
    if not MINYEAR <= year <= MAXYEAR or not 1 <= month_num <= 12:
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    return year, month_num


def plan_month(context: SchedulingContext) -> SchedulingResult:
    """Generate a month and attach the diagnostics the planner UI displays."""

    year, month = parse_month(context.month)
    assignments = generate_schedule(
        context.employees,
        context.shift_types,
        year,
        month,
        context.availabilities,
        rules=context.rules,
    )
    violations = evaluate_schedule(
        context.employees,
        context.shift_types,
        year,
        month,
        context.availabilities,
        assignments,
        context.rules,
    )
    balance = summarize_closing_balance(context.employees, context.shift_types, assignments, context.rules)
    return SchedulingResult(assignments=assignments, violations=violations, balance=balance)
