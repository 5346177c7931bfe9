from __future__ import annotations
from datetime import date, time, datetime
from typing import Optional, List
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, model_validator

from job.schema import SlotType
from assignment.schema import AssignmentResult

PackageName = Literal["essential", "hassleFree", "highStandard"]


class QuoteSchema(BaseModel):
    id: int
    short_slug: str
    customer_name: str
    phone: str
    email: Optional[str] = None
    postcode: Optional[str] = None
    address: Optional[str] = None
    job_description: str
    service_ids: List[str] = []
    selected_package: Optional[str] = None
    selected_at: Optional[datetime] = None
    selected_date: Optional[date] = None
    time_slot_type: Optional[str] = None
    exact_time_requested: Optional[time] = None
    job_id: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class QuoteBookingResponse(QuoteSchema):
    assignment: AssignmentResult


# PUBLIC payload from the quote page
class SelectBookingPayload(BaseModel):
    selected_package: PackageName
    selected_date: date
    time_slot_type: SlotType
    exact_time_requested: Optional[time] = None
    # narrows the quote's own service ids when given
    service_ids: Optional[List[str]] = None
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_exact_time(self):
        if self.time_slot_type == "exact" and self.exact_time_requested is None:
            raise ValueError("exact_time_requested is required when time_slot_type is 'exact'")
        return self
