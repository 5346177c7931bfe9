from __future__ import annotations
from datetime import date, time
from typing import Optional, List
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator

from job.schema import SlotType

RejectionReason = Literal[
    "no_contractors_available",
    "no_contractors_for_slot",
    "assignment_error",
]


class AssignRequest(BaseModel):
    quote_id: Optional[int] = None
    customer_name: str = Field(min_length=1)
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    postcode: Optional[str] = None
    job_description: str = Field(min_length=1)
    date: date
    time_slot_type: SlotType
    exact_time: Optional[time] = None
    required_service_ids: List[str] = []
    payout_pence: Optional[int] = Field(None, ge=0)
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_exact_time(self):
        if self.time_slot_type == "exact" and self.exact_time is None:
            raise ValueError("exact_time is required when time_slot_type is 'exact'")
        return self


class AssignmentResult(BaseModel):
    status: Literal["assigned", "rejected"]
    worker_id: Optional[int] = None
    worker_name: Optional[str] = None
    job_id: Optional[int] = None
    reason: Optional[RejectionReason] = None

    @classmethod
    def rejected(cls, reason: str) -> "AssignmentResult":
        return cls(status="rejected", reason=reason)

    @property
    def assigned(self) -> bool:
        return self.status == "assigned"


class ReassignPayload(BaseModel):
    worker_id: int
    model_config = ConfigDict(extra="forbid")
