from __future__ import annotations
import logging
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from availability.service import get_worker_candidates
from availability.slots import satisfies, subtract_consumed, remove_blocked
from core.locks import worker_day_lock
from job import service as job_service
from job.schema import JobCreate
from mastercalendar import service as master_service
from workeravailability import service as availability_store
from .schema import AssignRequest, AssignmentResult

logger = logging.getLogger(__name__)

AM_START = time(9, 0)
PM_START = time(13, 0)


# ---------- helpers ----------

def scheduled_time_for(slot_type: str, exact_time: Optional[time] = None) -> time:
    if slot_type == "exact" and exact_time is not None:
        return exact_time
    if slot_type == "pm":
        return PM_START
    # am and full days start in the morning
    return AM_START


def open_slots(db: Session, worker_id: int, d: date) -> set:
    resolved = availability_store.resolve(db, worker_id, d)
    if not resolved.available:
        return set()
    slots = subtract_consumed(resolved.slots, job_service.consumed_slots(db, worker_id, d))
    block = master_service.is_blocked(db, d)
    if block.blocked and block.partial_slots:
        slots = remove_blocked(slots, block.partial_slots)
    return slots


# ---------- public API ----------

def assign(db: Session, request: AssignRequest) -> AssignmentResult:
    """
    Book the request onto the best available worker.

    - candidates come from the aggregator for the date and service filter
    - keep those whose open slots fit the requested slot type
    - rank by jobs already on that date (fewest first), then worker id
    - under the worker/date lock: re-check, create the job, apply the hold

    Never raises; failures come back as a rejected result so the booking that
    triggered this still goes through and an operator can assign by hand.
    """
    try:
        return _assign(db, request)
    except Exception:
        db.rollback()
        logger.exception(
            "Automatic assignment failed for %s %s (quote %s)",
            request.date, request.time_slot_type, request.quote_id,
        )
        return AssignmentResult.rejected("assignment_error")


def _assign(db: Session, request: AssignRequest) -> AssignmentResult:
    candidates = get_worker_candidates(db, request.date, required_service_ids=request.required_service_ids)
    if not candidates:
        logger.warning("No workers available on %s (services=%s)", request.date, request.required_service_ids or "any")
        return AssignmentResult.rejected("no_contractors_available")

    fitting = [c for c in candidates if satisfies(c.slots, request.time_slot_type)]
    if not fitting:
        logger.warning("No worker has a %s slot on %s", request.time_slot_type, request.date)
        return AssignmentResult.rejected("no_contractors_for_slot")

    counts = job_service.count_jobs_on(db, [c.worker_id for c in fitting], request.date)
    ranked = sorted(fitting, key=lambda c: (counts.get(c.worker_id, 0), c.worker_id))
    scheduled_time = scheduled_time_for(request.time_slot_type, request.exact_time)

    for cand in ranked:
        with worker_day_lock(cand.worker_id, request.date):
            # Another booking may have taken the slot since candidates were read
            db.expire_all()
            if not satisfies(open_slots(db, cand.worker_id, request.date), request.time_slot_type):
                logger.info("Worker %s lost the %s slot on %s, trying next", cand.worker_id, request.time_slot_type, request.date)
                continue

            job = job_service.create_job(db, JobCreate(
                worker_id=cand.worker_id,
                quote_id=request.quote_id,
                customer_name=request.customer_name,
                customer_phone=request.customer_phone,
                address=request.address,
                postcode=request.postcode,
                job_description=request.job_description,
                scheduled_date=request.date,
                scheduled_time=scheduled_time,
                time_slot_type=request.time_slot_type,
                payout_pence=request.payout_pence,
            ), commit=False)
            availability_store.apply_booking_hold(
                db, cand.worker_id, request.date, request.time_slot_type, scheduled_time,
            )
            db.commit()
            job_id = job.id

        logger.info(
            "Assigned job %s to worker %s on %s (%s, %d job(s) already that day)",
            job_id, cand.worker_id, request.date, request.time_slot_type, counts.get(cand.worker_id, 0),
        )
        return AssignmentResult(
            status="assigned",
            worker_id=cand.worker_id,
            worker_name=cand.worker_name,
            job_id=job_id,
        )

    return AssignmentResult.rejected("no_contractors_for_slot")
