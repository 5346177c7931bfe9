from __future__ import annotations
from datetime import date
from typing import Optional, List
from typing_extensions import Literal
from pydantic import BaseModel

SlotToken = Literal["full", "am", "pm"]
AvailabilityReason = Literal["master_blocked", "day_inactive", "no_contractors", "available"]


class DateAvailability(BaseModel):
    date: date
    is_available: bool
    reason: AvailabilityReason
    slots: List[SlotToken] = []
    contractor_count: int = 0
    is_weekend: bool = False


class AvailabilityResponse(BaseModel):
    dates: List[DateAvailability]


class WorkerSlotsSchema(BaseModel):
    worker_id: int
    worker_name: Optional[str] = None
    date: date
    slots: List[SlotToken]


class SlotCounts(BaseModel):
    am: int = 0
    pm: int = 0


class AdminCalendarDay(BaseModel):
    date: date
    master_blocked: bool
    master_blocked_reason: Optional[str] = None
    day_active: bool
    contractor_count: int
    booking_count: int
    slots: SlotCounts


class AdminCalendarResponse(BaseModel):
    dates: List[AdminCalendarDay]
