"""Employee directory models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hrdesk.models.user import EMAIL_PATTERN


class EmployeeStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    ON_LEAVE = "on-leave"
    UNKNOWN = "unknown"


class Employee(BaseModel):
    """Full employee record as stored in the document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    company_id: str | None = None
    name: str | None = None
    email: str | None = None
    department: str | None = None
    position: str | None = None
    status: str | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None
    avatar: str | None = None
    avatar_color: str | None = None
    phone: str | None = None


class EmployeeCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str | None = Field(default=None, min_length=1)
    company_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=100, pattern=EMAIL_PATTERN)
    department: str | None = None
    position: str | None = None
    status: EmployeeStatus = EmployeeStatus.UNKNOWN
    avatar: str | None = None
    avatar_color: str | None = None
    phone: str | None = None


class EmployeeUpdate(BaseModel):
    """Partial update; only the keys sent are merged into the record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    company_id: str | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=100, pattern=EMAIL_PATTERN)
    department: str | None = None
    position: str | None = None
    status: EmployeeStatus | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None
    avatar: str | None = None
    avatar_color: str | None = None
    phone: str | None = None


class CheckInRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    check_in_time: str | None = Field(default=None, min_length=1)


class CheckOutRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    check_out_time: str | None = Field(default=None, min_length=1)


class AttendanceSummary(BaseModel):
    """Headcounts per attendance status, as shown on the dashboard cards."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    present: int = 0
    absent: int = 0
    on_leave: int = 0
    unknown: int = 0
