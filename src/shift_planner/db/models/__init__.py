from .roster import Availability, Employee, ShiftType
from .schedule import Assignment, ScheduleMonth

__all__ = [
    "Employee",
    "ShiftType",
    "Availability",
    "ScheduleMonth",
    "Assignment",
]
