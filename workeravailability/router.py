from __future__ import annotations
from datetime import date, timedelta
from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_worker_access
from availability.slots import ordered
from worker.service import require_worker

from .schema import (
    WeeklyPatternSchema,
    WeeklyPatternUpdate,
    DateOverrideSchema,
    DateOverridePayload,
    WorkerAvailabilitySchema,
    ResolvedAvailabilitySchema,
    TogglePayload,
    ToggleResult,
)
from . import service

worker_availability_router = APIRouter(prefix="/workers/{worker_id}/availability", tags=["Worker Availability"])


@worker_availability_router.get("", response_model=WorkerAvailabilitySchema)
def get_worker_availability(
    worker_id: int,
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    _user = Depends(require_worker_access),
    ):
    start = start or date.today()
    end = end or start + timedelta(days=90)
    if end < start:
        raise HTTPException(status_code=422, detail="end must be on/after start")
    return service.get_worker_availability(db, worker_id, start=start, end=end)


@worker_availability_router.get("/resolve", response_model=ResolvedAvailabilitySchema)
def resolve_worker_date(
    worker_id: int,
    on: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    _user = Depends(require_worker_access),
    ):
    require_worker(db, worker_id)
    res = service.resolve(db, worker_id, on)
    return ResolvedAvailabilitySchema(
        worker_id=worker_id,
        date=on,
        available=res.available,
        slots=ordered(res.slots),
        source=res.source,
    )


@worker_availability_router.put("/weekly/{day_of_week}", response_model=WeeklyPatternSchema)
def put_weekly_pattern(
    worker_id: int,
    payload: WeeklyPatternUpdate,
    day_of_week: int = Path(..., ge=0, le=6, description="0=Sun .. 6=Sat"),
    db: Session = Depends(get_db),
    _user = Depends(require_worker_access),
    ):
    try:
        return service.set_weekly_pattern(db, worker_id, day_of_week, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="weekly pattern already exists for this day")


@worker_availability_router.post("/overrides", response_model=DateOverrideSchema)
def post_date_override(
    worker_id: int,
    payload: DateOverridePayload,
    response: Response,
    db: Session = Depends(get_db),
    _user = Depends(require_worker_access),
    ):
    try:
        row, created = service.set_override(db, worker_id, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="override already exists for this date")
    if created:
        response.status_code = status.HTTP_201_CREATED
    return row


@worker_availability_router.delete("/overrides/{override_id}")
def delete_date_override(
    worker_id: int,
    override_id: int,
    db: Session = Depends(get_db),
    _user = Depends(require_worker_access),
    ) -> Dict[str, Any]:
    if not service.delete_override(db, worker_id, override_id):
        raise HTTPException(status_code=404, detail="override not found")
    return {"message": "override deleted"}


@worker_availability_router.post("/toggle", response_model=ToggleResult)
def toggle_date(
    worker_id: int,
    payload: TogglePayload,
    db: Session = Depends(get_db),
    _user = Depends(require_worker_access),
    ):
    return service.toggle_override(db, worker_id, payload.date)
