from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shift_planner.services.planning import parse_month


class ScheduleMonthBase(BaseModel):
    month: str  # YYYY-MM
    status: Literal["draft", "published"] = "draft"

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str) -> str:
        try:
            year, month = parse_month(value)
        except ValueError as exc:
            raise ValueError("month must use the YYYY-MM format") from exc
        return f"{year:04d}-{month:02d}"


class ScheduleMonthCreate(ScheduleMonthBase):
    pass


class ScheduleMonthRead(ScheduleMonthBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class ScheduleMonthUpdate(BaseModel):
    status: Literal["draft", "published"] | None = None


class AssignmentRead(BaseModel):
    id: int
    schedule_month_id: int
    employee_id: int
    shift_type_id: int
    date: date

    model_config = ConfigDict(from_attributes=True)


class ScheduleViolationRead(BaseModel):
    code: str
    message: str
    severity: Literal["info", "warning", "critical"] = "warning"
    scope: Literal["schedule", "day", "employee"] = "schedule"
    date: str | None = None
    employee_id: int | None = None
    shift_type_id: int | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class EmployeeBalance(BaseModel):
    employee_id: int
    employee_name: str
    closing_count: int
    total_count: int
    is_flagged: bool = False


class ScheduleStatistics(BaseModel):
    month: str
    max_closing: int
    min_closing: int
    closing_spread: int
    employees: list[EmployeeBalance] = Field(default_factory=list)


class ScheduleGenerationResponse(BaseModel):
    month: str
    assignments: list[AssignmentRead]
    violations: list[ScheduleViolationRead] = Field(default_factory=list)
    statistics: ScheduleStatistics
