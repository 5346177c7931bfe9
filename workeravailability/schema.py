from __future__ import annotations
from datetime import date, time
from typing import Optional, List
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, model_validator

from job.schema import JobSchema


# ---------- DB → API (read) ----------
class WeeklyPatternSchema(BaseModel):
    id: int
    worker_id: int
    day_of_week: int
    is_active: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    model_config = ConfigDict(from_attributes=True)


class DateOverrideSchema(BaseModel):
    id: int
    worker_id: int
    date: date
    is_available: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class WorkerAvailabilitySchema(BaseModel):
    weekly_pattern: List[WeeklyPatternSchema]
    date_overrides: List[DateOverrideSchema]
    jobs: List[JobSchema]


class ResolvedAvailabilitySchema(BaseModel):
    worker_id: int
    date: date
    available: bool
    slots: List[Literal["full", "am", "pm"]]
    source: Literal["override", "weekly", "none"]


# ---------- Client → API ----------
def _check_window(start: Optional[time], end: Optional[time]) -> None:
    if start is not None and end is not None and end <= start:
        raise ValueError("end_time must be after start_time")


class WeeklyPatternUpdate(BaseModel):
    is_active: Optional[bool] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_times(self):
        _check_window(self.start_time, self.end_time)
        return self


class DateOverridePayload(BaseModel):
    date: date
    is_available: Optional[bool] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_times(self):
        _check_window(self.start_time, self.end_time)
        return self


class TogglePayload(BaseModel):
    date: date
    model_config = ConfigDict(extra="forbid")


class ToggleResult(BaseModel):
    is_available: bool
    action: Literal["toggled", "created_unavailable"]
