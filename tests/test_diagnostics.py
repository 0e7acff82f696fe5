from shift_planner.services.diagnostics import evaluate_schedule, summarize_closing_balance
from shift_planner.services.rules import load_default_rules
from shift_planner.services.scheduler import GeneratedAssignment, generate_schedule

from .factories import closing_shift, employee, opening_shift, unavailable

ALICE = employee("e1", "Alice")
BOB = employee("e2", "Bob")
CLOSING = closing_shift(required_count=1)


def _assign(employee_id: str, days, shift_id: str = "s1") -> list[GeneratedAssignment]:
    return [
        GeneratedAssignment(employee_id=employee_id, date=f"2026-03-{day:02d}", shift_type_id=shift_id)
        for day in days
    ]


def _codes(violations) -> set[str]:
    return {violation.code for violation in violations}


def _evaluate(employees, shift_types, assignments, availabilities=()):
    return evaluate_schedule(employees, shift_types, 2026, 3, list(availabilities), assignments, load_default_rules())


def test_generated_schedule_only_reports_understaffing() -> None:
    shift = closing_shift()
    assignments = generate_schedule([ALICE, BOB], [shift], 2026, 3, [])

    violations = _evaluate([ALICE, BOB], [shift], assignments)

    assert _codes(violations) == {"understaffed-shift"}
    assert not [violation for violation in violations if violation.severity == "critical"]
    understaffed_days = sorted(violation.date for violation in violations)
    assert understaffed_days == [f"2026-03-{day:02d}" for day in (6, 7, 13, 14, 20, 21, 27, 28)]
    assert violations[0].meta == {"date": "2026-03-06", "assigned": 0, "required": 2}


def test_detects_streak_longer_than_limit() -> None:
    assignments = _assign("e1", range(1, 8)) + _assign("e2", range(8, 32))

    violations = _evaluate([ALICE, BOB], [CLOSING], assignments)

    streaks = [violation for violation in violations if violation.code == "consecutive-days-exceeded"]
    assert {violation.employee_id for violation in streaks} == {"e1", "e2"}
    alice = next(violation for violation in streaks if violation.employee_id == "e1")
    assert alice.meta == {"streak": 7}
    assert alice.severity == "critical"


def test_detects_work_during_forced_rest() -> None:
    assignments = _assign("e1", [1, 2, 3, 4, 5, 7])

    violations = _evaluate([ALICE], [CLOSING], assignments)

    skipped = [violation for violation in violations if violation.code == "forced-rest-skipped"]
    assert len(skipped) == 1
    assert skipped[0].date == "2026-03-07"
    assert "consecutive-days-exceeded" not in _codes(violations)


def test_detects_double_booking_and_unavailable_assignment() -> None:
    assignments = _assign("e1", [1]) + _assign("e1", [1], shift_id="s2")
    shifts = [CLOSING, opening_shift()]

    violations = _evaluate([ALICE], shifts, assignments, [unavailable("e1", "2026-03-01")])

    codes = _codes(violations)
    assert "double-booking" in codes
    assert "unavailable-assignment" in codes
    double = next(violation for violation in violations if violation.code == "double-booking")
    assert double.date == "2026-03-01"
    assert double.employee_id == "e1"


def test_detects_monthly_cap_exceeded() -> None:
    capped = employee("e1", "Alice", max_shifts_per_month=2)

    violations = _evaluate([capped], [CLOSING], _assign("e1", [1, 2, 3]))

    cap = next(violation for violation in violations if violation.code == "monthly-cap-exceeded")
    assert cap.meta == {"assigned": 3, "cap": 2}


def test_reports_unassigned_employee_as_info() -> None:
    violations = _evaluate([ALICE, BOB], [CLOSING], _assign("e1", [1]))

    unassigned = [violation for violation in violations if violation.code == "unassigned-employee"]
    assert [violation.employee_id for violation in unassigned] == ["e2"]
    assert unassigned[0].severity == "info"


def test_empty_inputs_report_empty_schedule_only() -> None:
    violations = _evaluate([], [CLOSING], [])

    assert [violation.code for violation in violations] == ["empty-schedule"]


def test_closing_balance_counts_and_flags_spread() -> None:
    shifts = [CLOSING, opening_shift()]
    assignments = _assign("e1", [1, 2, 3, 4]) + _assign("e2", [1], shift_id="s2") + _assign("e2", [2])

    balance = summarize_closing_balance([ALICE, BOB], shifts, assignments, load_default_rules())

    assert balance.closing_counts == {"e1": 4, "e2": 1}
    assert balance.total_counts == {"e1": 4, "e2": 2}
    assert balance.max_closing == 4
    assert balance.min_closing == 1
    assert balance.spread == 3
    assert balance.flagged_employee_ids == ["e1"]


def test_closing_balance_within_tolerance_flags_nobody() -> None:
    assignments = _assign("e1", [1, 2]) + _assign("e2", [3])

    balance = summarize_closing_balance([ALICE, BOB], [CLOSING], assignments, load_default_rules())

    assert balance.spread == 1
    assert balance.flagged_employee_ids == []


def test_closing_balance_counts_employee_without_shifts_as_zero() -> None:
    balance = summarize_closing_balance([ALICE, BOB], [CLOSING], _assign("e1", [1]), load_default_rules())

    assert balance.min_closing == 0
    assert balance.closing_counts["e2"] == 0
