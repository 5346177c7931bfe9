from __future__ import annotations
from datetime import date, timedelta
from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_admin

from .schema import (
    MasterDayPatternSchema,
    MasterDayPatternUpdate,
    MasterBlockedDateSchema,
    BlockedDateCreatePayload,
    BlockedDateCreate,
    BlockedDateTogglePayload,
    BlockedDateToggleResult,
)
from . import service

master_calendar_router = APIRouter(prefix="/master-calendar", tags=["Master Calendar"])


@master_calendar_router.get("/pattern", response_model=list[MasterDayPatternSchema])
def list_master_pattern(
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    return service.get_master_pattern(db)


@master_calendar_router.put("/pattern/{day_of_week}", response_model=MasterDayPatternSchema)
def put_master_pattern(
    payload: MasterDayPatternUpdate,
    day_of_week: int = Path(..., ge=0, le=6, description="0=Sun .. 6=Sat"),
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    return service.update_day_pattern(db, day_of_week, payload)


@master_calendar_router.get("/blocked", response_model=list[MasterBlockedDateSchema])
def list_blocked_dates(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    start = start or date.today()
    end = end or start + timedelta(days=90)
    if end < start:
        raise HTTPException(status_code=422, detail="end must be on/after start")
    return service.get_blocked_dates(db, start=start, end=end)


@master_calendar_router.post("/blocked", response_model=MasterBlockedDateSchema, status_code=status.HTTP_201_CREATED)
def create_blocked_date(
    payload: BlockedDateCreatePayload,
    db: Session = Depends(get_db),
    admin = Depends(require_admin),
    ):
    dto = BlockedDateCreate(created_by=admin.id, **payload.model_dump())
    try:
        return service.create_blocked_date(db, dto)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="date is already blocked")


@master_calendar_router.delete("/blocked/{block_id}")
def delete_blocked_date(
    block_id: int,
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ) -> Dict[str, Any]:
    if not service.delete_blocked_date(db, block_id):
        raise HTTPException(status_code=404, detail="blocked date not found")
    return {"message": "blocked date removed"}


@master_calendar_router.post("/blocked/toggle", response_model=BlockedDateToggleResult)
def toggle_blocked_date(
    payload: BlockedDateTogglePayload,
    db: Session = Depends(get_db),
    admin = Depends(require_admin),
    ):
    return service.toggle_blocked_date(db, payload.date, reason=payload.reason, created_by=admin.id)
