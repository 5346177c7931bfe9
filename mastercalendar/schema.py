from __future__ import annotations
from datetime import date, time
from typing import Optional, List
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator

SlotToken = Literal["am", "pm", "full"]


# ---------- DB → API (read) ----------
class MasterDayPatternSchema(BaseModel):
    day_of_week: int
    is_active: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    model_config = ConfigDict(from_attributes=True)


class MasterBlockedDateSchema(BaseModel):
    id: int
    date: date
    reason: Optional[str] = None
    blocked_slots: Optional[List[SlotToken]] = None
    created_by: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class BlockStatus(BaseModel):
    blocked: bool
    reason: Optional[str] = None
    partial_slots: Optional[List[SlotToken]] = None

    @property
    def is_full_block(self) -> bool:
        return self.blocked and not self.partial_slots


# ---------- Client → API ----------
class MasterDayPatternUpdate(BaseModel):
    is_active: Optional[bool] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_times(self):
        if self.start_time is not None and self.end_time is not None:
            if self.end_time <= self.start_time:
                raise ValueError("end_time must be after start_time")
        return self


class BlockedDateCreatePayload(BaseModel):
    date: date
    reason: Optional[str] = None
    blocked_slots: Optional[List[SlotToken]] = Field(None, min_length=1)
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class BlockedDateCreate(BaseModel):
    date: date
    reason: Optional[str] = None
    blocked_slots: Optional[List[SlotToken]] = None
    created_by: Optional[int] = None


class BlockedDateTogglePayload(BaseModel):
    date: date
    reason: Optional[str] = None
    model_config = ConfigDict(extra="forbid")


class BlockedDateToggleResult(BaseModel):
    blocked: bool
    action: Literal["blocked", "unblocked"]
    id: Optional[int] = None
