from __future__ import annotations
import logging
from datetime import date, time
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config_loader import settings
from core.dates import day_of_week
from .models import MasterDayPattern, MasterBlockedDate
from .schema import BlockStatus, BlockedDateCreate, MasterDayPatternUpdate, BlockedDateToggleResult

logger = logging.getLogger(__name__)

# Mon-Fri, with 0=Sun .. 6=Sat
DEFAULT_ACTIVE_DAYS = frozenset({1, 2, 3, 4, 5})


# ---------- rules (pure) ----------

def _validate_day_of_week(dow: int) -> None:
    if not (0 <= dow <= 6):
        raise HTTPException(status_code=422, detail="day_of_week must be between 0 and 6")


def day_active(pattern: Optional[MasterDayPattern], dow: int) -> bool:
    """A stored row decides; without one the business runs Mon-Fri."""
    if pattern is None:
        return dow in DEFAULT_ACTIVE_DAYS
    return bool(pattern.is_active)


def block_status(block: Optional[MasterBlockedDate]) -> BlockStatus:
    if block is None:
        return BlockStatus(blocked=False)
    return BlockStatus(
        blocked=True,
        reason=block.reason or "Blocked",
        partial_slots=list(block.blocked_slots) if block.blocked_slots else None,
    )


# ---------- queries ----------

def get_day_pattern(db: Session, dow: int) -> Optional[MasterDayPattern]:
    _validate_day_of_week(dow)
    return db.scalars(select(MasterDayPattern).where(MasterDayPattern.day_of_week == dow)).first()


def load_day_patterns(db: Session) -> dict[int, MasterDayPattern]:
    return {p.day_of_week: p for p in db.scalars(select(MasterDayPattern))}


def is_day_active(db: Session, d: date) -> bool:
    dow = day_of_week(d)
    return day_active(get_day_pattern(db, dow), dow)


def get_blocked_date(db: Session, d: date) -> Optional[MasterBlockedDate]:
    return db.scalars(select(MasterBlockedDate).where(MasterBlockedDate.date == d)).first()


def is_blocked(db: Session, d: date) -> BlockStatus:
    return block_status(get_blocked_date(db, d))


def get_blocked_dates(db: Session, *, start: date, end: date) -> list[MasterBlockedDate]:
    stmt = (
        select(MasterBlockedDate)
        .where(MasterBlockedDate.date >= start, MasterBlockedDate.date <= end)
        .order_by(MasterBlockedDate.date.asc())
    )
    return list(db.scalars(stmt))


def load_blocks(db: Session, start: date, end: date) -> dict[date, MasterBlockedDate]:
    return {b.date: b for b in get_blocked_dates(db, start=start, end=end)}


# ---------- weekly pattern ----------

def initialize_master_pattern(db: Session) -> None:
    """Write the Mon-Fri 09:00-17:00 defaults the first time the pattern is read."""
    existing = {p.day_of_week for p in db.scalars(select(MasterDayPattern))}
    if len(existing) == 7:
        return
    for dow in range(7):
        if dow in existing:
            continue
        active = dow in DEFAULT_ACTIVE_DAYS
        db.add(MasterDayPattern(
            day_of_week=dow,
            is_active=active,
            start_time=settings.DEFAULT_START_TIME if active else None,
            end_time=settings.DEFAULT_END_TIME if active else None,
        ))
    db.commit()
    logger.info("Initialized default master availability for %d weekday(s)", 7 - len(existing))


def get_master_pattern(db: Session) -> list[MasterDayPattern]:
    initialize_master_pattern(db)
    return list(db.scalars(select(MasterDayPattern).order_by(MasterDayPattern.day_of_week)))


def update_day_pattern(db: Session, dow: int, patch: MasterDayPatternUpdate) -> MasterDayPattern:
    _validate_day_of_week(dow)
    row = get_day_pattern(db, dow)
    if row is None:
        active = dow in DEFAULT_ACTIVE_DAYS
        row = MasterDayPattern(
            day_of_week=dow,
            is_active=active,
            start_time=settings.DEFAULT_START_TIME,
            end_time=settings.DEFAULT_END_TIME,
        )
        db.add(row)

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k, v in data.items():
        setattr(row, k, v)

    if row.start_time is not None and row.end_time is not None and row.end_time <= row.start_time:
        db.rollback()
        raise HTTPException(status_code=422, detail="end_time must be after start_time")

    db.commit()
    db.refresh(row)
    logger.info("Master pattern for day %d set to active=%s %s-%s", dow, row.is_active, row.start_time, row.end_time)
    return row


# ---------- blocked dates ----------

def create_blocked_date(db: Session, dto: BlockedDateCreate) -> MasterBlockedDate:
    if get_blocked_date(db, dto.date):
        raise HTTPException(status_code=409, detail="date is already blocked")
    row = MasterBlockedDate(
        date=dto.date,
        reason=dto.reason,
        blocked_slots=list(dto.blocked_slots) if dto.blocked_slots else None,
        created_by=dto.created_by,
    )
    db.add(row)
    # Let IntegrityError bubble; router maps to 409 on a racing duplicate
    db.commit()
    db.refresh(row)
    return row


def delete_blocked_date(db: Session, block_id: int) -> bool:
    row = db.get(MasterBlockedDate, block_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True


def toggle_blocked_date(db: Session, d: date, reason: Optional[str] = None, created_by: Optional[int] = None) -> BlockedDateToggleResult:
    existing = get_blocked_date(db, d)
    if existing:
        db.delete(existing)
        db.commit()
        return BlockedDateToggleResult(blocked=False, action="unblocked")

    row = MasterBlockedDate(date=d, reason=reason, created_by=created_by)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="date is already blocked")
    db.refresh(row)
    return BlockedDateToggleResult(blocked=True, action="blocked", id=row.id)
