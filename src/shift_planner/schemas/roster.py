from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmployeeBase(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str | None = None
    phone: str | None = None
    max_shifts_per_month: int | None = Field(default=None, ge=0)


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeRead(EmployeeBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmployeeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: str | None = None
    phone: str | None = None
    max_shifts_per_month: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("name cannot be null")
        return value


class ShiftTypeBase(BaseModel):
    label: str = Field(min_length=1, max_length=120)
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    required_count: int = Field(default=1, ge=1)
    is_closing: bool = False


class ShiftTypeCreate(ShiftTypeBase):
    pass


class ShiftTypeRead(ShiftTypeBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShiftTypeUpdate(BaseModel):
    label: str | None = Field(default=None, min_length=1, max_length=120)
    start_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    end_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    required_count: int | None = Field(default=None, ge=1)
    is_closing: bool | None = None

    @field_validator("label", "start_time", "end_time", "required_count", "is_closing")
    @classmethod
    def reject_null(cls, value):
        # Columns are NOT NULL; omit a field to leave it unchanged.
        if value is None:
            raise ValueError("field cannot be null")
        return value


class AvailabilityUpsert(BaseModel):
    date: date
    is_unavailable: bool = True


class AvailabilityRead(AvailabilityUpsert):
    id: int
    employee_id: int

    model_config = ConfigDict(from_attributes=True)
