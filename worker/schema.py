from __future__ import annotations
from typing import Optional, List
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, Field

WorkerStatusValue = Literal["available", "busy", "unavailable"]


class WorkerSchema(BaseModel):
    id: int
    display_name: str
    postcode: Optional[str] = None
    radius_miles: Optional[int] = None
    availability_status: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class WorkerDetailSchema(WorkerSchema):
    service_ids: List[str] = []


# PUBLIC payload, what clients send
class WorkerCreatePayload(BaseModel):
    display_name: str = Field(min_length=1)
    postcode: Optional[str] = None
    radius_miles: Optional[int] = Field(None, ge=0)
    availability_status: Optional[WorkerStatusValue] = None
    service_ids: List[str] = []
    model_config = ConfigDict(extra="forbid")


class WorkerUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1)
    postcode: Optional[str] = None
    radius_miles: Optional[int] = Field(None, ge=0)
    availability_status: Optional[WorkerStatusValue] = None
    model_config = ConfigDict(extra="forbid")


class WorkerSkillsPayload(BaseModel):
    service_ids: List[str]
    model_config = ConfigDict(extra="forbid")
