from __future__ import annotations
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from availability.slots import satisfies
from core.locks import worker_day_lock, worker_day_locks
from job.models import Job
from job import service as job_service
from worker.service import require_worker
from workeravailability import service as availability_store
from .auto_assign_service import open_slots

logger = logging.getLogger(__name__)


def cancel(db: Session, job_id: int) -> Job:
    """Cancel a job and give its worker the booked time back."""
    job = job_service.require_job(db, job_id)
    worker_id, day = job.worker_id, job.scheduled_date

    with worker_day_lock(worker_id, day):
        try:
            job_service.cancel_job(db, job, commit=False)
            remaining = job_service.active_jobs_on(db, worker_id, day, exclude_job_id=job.id)
            availability_store.release_booking_hold(db, worker_id, day, remaining)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(job)
    logger.info("Cancelled job %s for worker %s on %s", job.id, worker_id, day)
    return job


def reassign(db: Session, job_id: int, new_worker_id: int) -> Job:
    """
    Move a job to another worker: release the old worker's hold, then hold
    the same part of the day on the new worker. The job goes back to pending.
    The new worker must still have that part of the day open, else 409.
    """
    job = job_service.require_job(db, job_id)
    require_worker(db, new_worker_id)
    old_worker_id, day = job.worker_id, job.scheduled_date
    if old_worker_id == new_worker_id:
        raise HTTPException(status_code=409, detail="job is already assigned to this worker")

    with worker_day_locks([(old_worker_id, day), (new_worker_id, day)]):
        try:
            if job.time_slot_type and not satisfies(open_slots(db, new_worker_id, day), job.time_slot_type):
                raise HTTPException(
                    status_code=409,
                    detail=f"worker {new_worker_id} has no open {job.time_slot_type} slot on {day}",
                )
            job_service.reassign_job(db, job, new_worker_id, commit=False)
            remaining = job_service.active_jobs_on(db, old_worker_id, day)
            availability_store.release_booking_hold(db, old_worker_id, day, remaining)
            if job.time_slot_type:
                availability_store.apply_booking_hold(db, new_worker_id, day, job.time_slot_type, job.scheduled_time)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(job)
    logger.info("Reassigned job %s from worker %s to %s on %s", job.id, old_worker_id, new_worker_id, day)
    return job
