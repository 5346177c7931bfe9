from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Iterable, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from core.dates import day_of_week, is_weekend, daterange, month_bounds
from job.models import JobStatus
from job.service import consumed_from_jobs
from mastercalendar.service import day_active, block_status
from workeravailability.service import resolve_from_rows
from worker.models import Worker
from .slots import Slot, subtract_consumed, remove_blocked, ordered, has_am, has_pm
from .snapshot import CalendarSnapshot, load_snapshot
from .schema import DateAvailability, AdminCalendarDay, SlotCounts

logger = logging.getLogger(__name__)


@dataclass
class WorkerSlots:
    worker_id: int
    worker_name: Optional[str]
    date: date
    slots: set[Slot]


# ---------- per-date computation (pure over a snapshot) ----------

def worker_slots_on(snap: CalendarSnapshot, worker: Worker, d: date) -> set[Slot]:
    """Resolved slots for the worker, minus what their active jobs already consume."""
    override = snap.overrides.get((worker.id, d))
    weekly = None if override is not None else snap.weekly.get((worker.id, day_of_week(d)))
    resolved = resolve_from_rows(override, weekly)
    if not resolved.available:
        return set()
    return subtract_consumed(resolved.slots, consumed_from_jobs(snap.jobs_for(worker.id, d)))


def candidates_on(snap: CalendarSnapshot, d: date) -> List[WorkerSlots]:
    """Eligible workers with at least one open slot on ``d``, in worker id order."""
    out: List[WorkerSlots] = []
    for worker in snap.workers:
        slots = worker_slots_on(snap, worker, d)
        if slots:
            out.append(WorkerSlots(worker.id, worker.display_name, d, slots))
    return out


def date_availability(snap: CalendarSnapshot, d: date) -> DateAvailability:
    weekend = is_weekend(d)
    dow = day_of_week(d)

    if not day_active(snap.day_patterns.get(dow), dow):
        return DateAvailability(date=d, is_available=False, reason="day_inactive", slots=[], is_weekend=weekend)

    block = block_status(snap.blocks.get(d))
    if block.is_full_block:
        return DateAvailability(date=d, is_available=False, reason="master_blocked", slots=[], is_weekend=weekend)

    candidates = candidates_on(snap, d)
    union: set[Slot] = set()
    for c in candidates:
        union |= c.slots

    if not union:
        return DateAvailability(
            date=d, is_available=False, reason="no_contractors", slots=[], contractor_count=0, is_weekend=weekend,
        )

    if block.blocked and block.partial_slots:
        union = remove_blocked(union, block.partial_slots)

    return DateAvailability(
        date=d,
        is_available=bool(union),
        # only the partial block can empty a non-empty union
        reason="available" if union else "master_blocked",
        slots=ordered(union),
        contractor_count=len(candidates),
        is_weekend=weekend,
    )


# ---------- public operations ----------

def get_availability(
    db: Session,
    *,
    start_date: date,
    days: int,
    postcode: Optional[str] = None,
    required_service_ids: Optional[Iterable[str]] = None,
) -> List[DateAvailability]:
    """Day-by-day availability for ``days`` dates starting at ``start_date``."""
    if days < 1:
        raise HTTPException(status_code=422, detail="days must be at least 1")
    if postcode:
        # Accepted for the booking UI, not yet matched against worker radius
        logger.debug("Ignoring postcode %s for availability lookup", postcode)

    end_date = start_date + timedelta(days=days - 1)
    service_ids = list(required_service_ids or [])
    snap = load_snapshot(db, start_date, end_date, required_service_ids=service_ids)
    results = [date_availability(snap, d) for d in daterange(start_date, end_date)]

    logger.info(
        "Availability %s..%s: %d of %d dates bookable (%d eligible workers, services=%s)",
        start_date, end_date, sum(1 for r in results if r.is_available), len(results),
        len(snap.workers), service_ids or "any",
    )
    return results


def get_worker_candidates(
    db: Session,
    d: date,
    *,
    required_service_ids: Optional[Iterable[str]] = None,
) -> List[WorkerSlots]:
    """
    Per-worker slots for one date, with the master calendar applied: an
    inactive or fully blocked date has no candidates and a partial block is
    taken out of every worker's slots.
    """
    snap = load_snapshot(db, d, d, required_service_ids=required_service_ids)
    dow = day_of_week(d)
    if not day_active(snap.day_patterns.get(dow), dow):
        return []
    block = block_status(snap.blocks.get(d))
    if block.is_full_block:
        return []

    candidates = candidates_on(snap, d)
    if block.blocked and block.partial_slots:
        for c in candidates:
            c.slots = remove_blocked(c.slots, block.partial_slots)
        candidates = [c for c in candidates if c.slots]
    return candidates


def get_admin_calendar(db: Session, month: str, days: Optional[int] = None) -> List[AdminCalendarDay]:
    try:
        first, last = month_bounds(month)
    except ValueError:
        raise HTTPException(status_code=422, detail="month must look like YYYY-MM")
    if days is not None:
        if days < 1:
            raise HTTPException(status_code=422, detail="days must be at least 1")
        last = first + timedelta(days=days - 1)

    snap = load_snapshot(db, first, last)
    out: List[AdminCalendarDay] = []
    for d in daterange(first, last):
        dow = day_of_week(d)
        block = block_status(snap.blocks.get(d))
        candidates = candidates_on(snap, d)
        out.append(AdminCalendarDay(
            date=d,
            master_blocked=block.is_full_block,
            master_blocked_reason=block.reason,
            day_active=day_active(snap.day_patterns.get(dow), dow),
            contractor_count=len(candidates),
            booking_count=sum(1 for j in snap.jobs_on(d) if j.status != JobStatus.cancelled),
            # worker capacity before any partial master block is applied
            slots=SlotCounts(
                am=sum(1 for c in candidates if has_am(c.slots)),
                pm=sum(1 for c in candidates if has_pm(c.slots)),
            ),
        ))
    return out
