from __future__ import annotations
from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from core.config_loader import settings
from core.database import get_db
from authz.deps import require_admin

from .schema import AvailabilityResponse, AdminCalendarResponse, WorkerSlotsSchema
from .slots import ordered
from . import service

availability_router = APIRouter(prefix="/availability", tags=["Availability"])


def _split_ids(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


# Public: date picker on the quote page
@availability_router.get("", response_model=AvailabilityResponse)
def get_public_availability(
    days: Optional[int] = Query(None, ge=1),
    postcode: Optional[str] = Query(None),
    service_ids: Optional[str] = Query(None, description="comma separated service ids"),
    start: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    ):
    days = days or settings.DEFAULT_AVAILABILITY_DAYS
    if days > settings.MAX_AVAILABILITY_DAYS:
        raise HTTPException(status_code=422, detail=f"days must be at most {settings.MAX_AVAILABILITY_DAYS}")
    dates = service.get_availability(
        db,
        start_date=start or date.today(),
        days=days,
        postcode=postcode,
        required_service_ids=_split_ids(service_ids),
    )
    return {"dates": dates}


@availability_router.get("/admin/calendar", response_model=AdminCalendarResponse)
def get_admin_calendar(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    days: Optional[int] = Query(None, ge=1, le=62),
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    month = month or date.today().strftime("%Y-%m")
    return {"dates": service.get_admin_calendar(db, month, days)}


@availability_router.get("/candidates", response_model=list[WorkerSlotsSchema])
def get_candidates(
    on: date = Query(..., alias="date"),
    service_ids: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    candidates = service.get_worker_candidates(db, on, required_service_ids=_split_ids(service_ids))
    return [
        WorkerSlotsSchema(worker_id=c.worker_id, worker_name=c.worker_name, date=c.date, slots=ordered(c.slots))
        for c in candidates
    ]
