from __future__ import annotations
from datetime import date, time, datetime
from typing import Optional
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, Field

from .models import JobStatus

SlotType = Literal["am", "pm", "full", "exact"]


class JobSchema(BaseModel):
    id: int
    worker_id: int
    quote_id: Optional[int] = None
    customer_name: str
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    postcode: Optional[str] = None
    job_description: str
    scheduled_date: date
    scheduled_time: Optional[time] = None
    time_slot_type: Optional[str] = None
    status: JobStatus
    payout_pence: Optional[int] = None
    accepted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# INTERNAL DTO for the service
class JobCreate(BaseModel):
    worker_id: int
    quote_id: Optional[int] = None
    customer_name: str
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    postcode: Optional[str] = None
    job_description: str
    scheduled_date: date
    scheduled_time: Optional[time] = None
    time_slot_type: Optional[SlotType] = None
    payout_pence: Optional[int] = Field(None, ge=0)


class JobStatusUpdate(BaseModel):
    status: JobStatus
    model_config = ConfigDict(extra="forbid")
