from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional, Iterable, Literal

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from availability.slots import Slot, NOON, slots_from_range, slot_for_time, has_am, has_pm
from core.config_loader import settings
from core.dates import day_of_week
from job.models import Job
from job import service as job_service
from worker.service import require_worker
from .models import WorkerWeeklyPattern, WorkerDateOverride
from .schema import WeeklyPatternUpdate, DateOverridePayload, ToggleResult

logger = logging.getLogger(__name__)


@dataclass
class ResolvedAvailability:
    available: bool
    slots: set[Slot] = field(default_factory=set)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    source: Literal["override", "weekly", "none"] = "none"


# ---------- resolution (pure) ----------

def resolve_from_rows(
    override: Optional[WorkerDateOverride],
    weekly: Optional[WorkerWeeklyPattern],
) -> ResolvedAvailability:
    """
    An override for the date always wins, in both directions. Without one the
    active weekly row for the weekday applies; without that, unavailable.
    """
    if override is not None:
        if not override.is_available:
            return ResolvedAvailability(available=False, source="override")
        start = override.start_time or settings.DEFAULT_START_TIME
        end = override.end_time or settings.DEFAULT_END_TIME
        return ResolvedAvailability(True, slots_from_range(start, end), start, end, "override")

    if weekly is not None and weekly.is_active:
        start = weekly.start_time or settings.DEFAULT_START_TIME
        end = weekly.end_time or settings.DEFAULT_END_TIME
        return ResolvedAvailability(True, slots_from_range(start, end), start, end, "weekly")

    return ResolvedAvailability(available=False)


# ---------- queries ----------

def get_weekly_row(db: Session, worker_id: int, dow: int) -> Optional[WorkerWeeklyPattern]:
    stmt = select(WorkerWeeklyPattern).where(
        WorkerWeeklyPattern.worker_id == worker_id,
        WorkerWeeklyPattern.day_of_week == dow,
    )
    return db.scalars(stmt).first()


def get_weekly_pattern(db: Session, worker_id: int) -> list[WorkerWeeklyPattern]:
    stmt = (
        select(WorkerWeeklyPattern)
        .where(WorkerWeeklyPattern.worker_id == worker_id)
        .order_by(WorkerWeeklyPattern.day_of_week)
    )
    return list(db.scalars(stmt))


def get_override(db: Session, worker_id: int, d: date) -> Optional[WorkerDateOverride]:
    stmt = select(WorkerDateOverride).where(
        WorkerDateOverride.worker_id == worker_id,
        WorkerDateOverride.date == d,
    )
    return db.scalars(stmt).first()


def get_overrides(db: Session, worker_id: int, *, start: date, end: date) -> list[WorkerDateOverride]:
    stmt = (
        select(WorkerDateOverride)
        .where(
            WorkerDateOverride.worker_id == worker_id,
            WorkerDateOverride.date >= start,
            WorkerDateOverride.date <= end,
        )
        .order_by(WorkerDateOverride.date)
    )
    return list(db.scalars(stmt))


def load_weekly(db: Session, worker_ids: Iterable[int]) -> dict[tuple[int, int], WorkerWeeklyPattern]:
    ids = list(worker_ids)
    if not ids:
        return {}
    stmt = select(WorkerWeeklyPattern).where(WorkerWeeklyPattern.worker_id.in_(ids))
    return {(r.worker_id, r.day_of_week): r for r in db.scalars(stmt)}


def load_overrides(db: Session, worker_ids: Iterable[int], start: date, end: date) -> dict[tuple[int, date], WorkerDateOverride]:
    ids = list(worker_ids)
    if not ids:
        return {}
    stmt = select(WorkerDateOverride).where(
        WorkerDateOverride.worker_id.in_(ids),
        WorkerDateOverride.date >= start,
        WorkerDateOverride.date <= end,
    )
    return {(r.worker_id, r.date): r for r in db.scalars(stmt)}


def resolve(db: Session, worker_id: int, d: date) -> ResolvedAvailability:
    override = get_override(db, worker_id, d)
    weekly = None if override is not None else get_weekly_row(db, worker_id, day_of_week(d))
    return resolve_from_rows(override, weekly)


def get_worker_availability(db: Session, worker_id: int, *, start: date, end: date) -> dict:
    require_worker(db, worker_id)
    return {
        "weekly_pattern": get_weekly_pattern(db, worker_id),
        "date_overrides": get_overrides(db, worker_id, start=start, end=end),
        "jobs": job_service.jobs_in_range(db, start=start, end=end, worker_id=worker_id),
    }


# ---------- worker-authored mutations (last write wins) ----------

def _clear_hold(row: WorkerDateOverride) -> None:
    row.booking_hold = False
    row.created_by_booking = False
    row.base_is_available = None
    row.base_start_time = None
    row.base_end_time = None


def set_weekly_pattern(db: Session, worker_id: int, dow: int, patch: WeeklyPatternUpdate) -> WorkerWeeklyPattern:
    require_worker(db, worker_id)
    if not (0 <= dow <= 6):
        raise HTTPException(status_code=422, detail="day_of_week must be between 0 and 6")

    row = get_weekly_row(db, worker_id, dow)
    if row is None:
        row = WorkerWeeklyPattern(
            worker_id=worker_id,
            day_of_week=dow,
            is_active=True,
            start_time=settings.DEFAULT_START_TIME,
            end_time=settings.DEFAULT_END_TIME,
        )
        db.add(row)

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k, v in data.items():
        setattr(row, k, v)
    if row.start_time and row.end_time and row.end_time <= row.start_time:
        db.rollback()
        raise HTTPException(status_code=422, detail="end_time must be after start_time")

    db.commit()
    db.refresh(row)
    return row


def set_override(db: Session, worker_id: int, payload: DateOverridePayload) -> tuple[WorkerDateOverride, bool]:
    """Upsert the override for (worker, date). Returns (row, created)."""
    require_worker(db, worker_id)
    row = get_override(db, worker_id, payload.date)
    created = row is None
    if created:
        row = WorkerDateOverride(
            worker_id=worker_id,
            date=payload.date,
            is_available=True if payload.is_available is None else payload.is_available,
            start_time=payload.start_time or settings.DEFAULT_START_TIME,
            end_time=payload.end_time or settings.DEFAULT_END_TIME,
            notes=payload.notes,
        )
        db.add(row)
    else:
        data = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"date"})
        for k, v in data.items():
            setattr(row, k, v)
        _clear_hold(row)

    if row.start_time and row.end_time and row.end_time <= row.start_time:
        db.rollback()
        raise HTTPException(status_code=422, detail="end_time must be after start_time")

    db.commit()
    db.refresh(row)
    return row, created


def toggle_override(db: Session, worker_id: int, d: date) -> ToggleResult:
    require_worker(db, worker_id)
    row = get_override(db, worker_id, d)
    if row is not None:
        row.is_available = not row.is_available
        _clear_hold(row)
        db.commit()
        return ToggleResult(is_available=row.is_available, action="toggled")

    db.add(WorkerDateOverride(
        worker_id=worker_id,
        date=d,
        is_available=False,
        start_time=settings.DEFAULT_START_TIME,
        end_time=settings.DEFAULT_END_TIME,
    ))
    db.commit()
    return ToggleResult(is_available=False, action="created_unavailable")


def delete_override(db: Session, worker_id: int, override_id: int) -> bool:
    row = db.get(WorkerDateOverride, override_id)
    if not row or row.worker_id != worker_id:
        return False
    db.delete(row)
    db.commit()
    return True


# ---------- booking holds ----------

def booked_half(slot_type: str, at: Optional[time] = None) -> Slot:
    """Which part of the day a booking takes; exact bookings fall in the half their time is in."""
    if slot_type == "full":
        return Slot.full
    if slot_type == "am":
        return Slot.am
    if slot_type == "pm":
        return Slot.pm
    return slot_for_time(at) if at is not None else Slot.full


def _narrow(row: WorkerDateOverride, half: Slot) -> None:
    label = half.value
    if half is Slot.full or not row.is_available:
        row.is_available = False
        row.notes = "Booked (full day)" if half is Slot.full else f"Booked ({label})"
        return

    start = row.start_time or settings.DEFAULT_START_TIME
    end = row.end_time or settings.DEFAULT_END_TIME
    current = slots_from_range(start, end)

    # Only the booked half was open: nothing left for the day
    if (half is Slot.am and not has_pm(current)) or (half is Slot.pm and not has_am(current)):
        row.is_available = False
        row.notes = f"Booked ({label})"
        return

    if half is Slot.am:
        row.start_time = max(start, NOON)
        row.end_time = end
    else:
        row.start_time = start
        row.end_time = min(end, NOON)
    row.notes = f"Partial booking ({label} booked)"


def apply_booking_hold(db: Session, worker_id: int, d: date, slot_type: str, at: Optional[time] = None) -> WorkerDateOverride:
    """
    Consume the booked part of a worker's day by writing (or narrowing) the
    date override. The window before the first hold is remembered on the row.
    Does not commit; the caller owns the transaction.
    """
    row = get_override(db, worker_id, d)
    if row is None:
        current = resolve_from_rows(None, get_weekly_row(db, worker_id, day_of_week(d)))
        row = WorkerDateOverride(
            worker_id=worker_id,
            date=d,
            is_available=current.available,
            start_time=current.start_time,
            end_time=current.end_time,
            created_by_booking=True,
        )
        db.add(row)

    if not row.booking_hold:
        row.booking_hold = True
        row.base_is_available = row.is_available
        row.base_start_time = row.start_time
        row.base_end_time = row.end_time

    half = booked_half(slot_type, at)
    _narrow(row, half)
    db.flush()
    logger.debug("Hold applied for worker %s on %s: %s", worker_id, d, row.notes)
    return row


def release_booking_hold(db: Session, worker_id: int, d: date, remaining_jobs: Iterable[Job]) -> Optional[WorkerDateOverride]:
    """
    Undo a booking's hold: restore the remembered window, then re-apply the
    holds of the jobs still booked on that day. Does not commit.
    """
    row = get_override(db, worker_id, d)
    if row is None or not row.booking_hold:
        return row

    booked = [j for j in remaining_jobs if j.time_slot_type]
    if not booked and row.created_by_booking:
        db.delete(row)
        db.flush()
        logger.debug("Hold released for worker %s on %s (override removed)", worker_id, d)
        return None

    row.is_available = bool(row.base_is_available)
    row.start_time = row.base_start_time
    row.end_time = row.base_end_time
    row.notes = None

    if not booked:
        _clear_hold(row)
    for job in booked:
        half = booked_half(job.time_slot_type, job.scheduled_time)
        _narrow(row, half)

    db.flush()
    logger.debug("Hold released for worker %s on %s, %d booking(s) remain", worker_id, d, len(booked))
    return row
