from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Optional, Iterable, List

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from availability.slots import Slot, slot_for_time
from .models import Job, JobStatus, ACTIVE_STATUSES
from .schema import JobCreate

# pending -> accepted | cancelled, accepted -> in_progress | cancelled, in_progress -> completed
ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.pending: frozenset({JobStatus.accepted, JobStatus.cancelled}),
    JobStatus.accepted: frozenset({JobStatus.in_progress, JobStatus.cancelled}),
    JobStatus.in_progress: frozenset({JobStatus.completed}),
    JobStatus.completed: frozenset(),
    JobStatus.cancelled: frozenset(),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------- queries ----------

def get_job(db: Session, job_id: int) -> Job | None:
    return db.get(Job, job_id)


def require_job(db: Session, job_id: int) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="job not found")
    return job


def jobs_in_range(
    db: Session,
    *,
    start: date,
    end: date,
    worker_id: Optional[int] = None,
    worker_ids: Optional[Iterable[int]] = None,
    statuses: Optional[Iterable[JobStatus]] = None,
) -> List[Job]:
    stmt = select(Job).where(Job.scheduled_date >= start, Job.scheduled_date <= end)
    if worker_id is not None:
        stmt = stmt.where(Job.worker_id == worker_id)
    if worker_ids is not None:
        stmt = stmt.where(Job.worker_id.in_(list(worker_ids)))
    if statuses is not None:
        stmt = stmt.where(Job.status.in_(list(statuses)))
    stmt = stmt.order_by(Job.scheduled_date, Job.scheduled_time, Job.id)
    return list(db.scalars(stmt))


def active_jobs_on(db: Session, worker_id: int, d: date, *, exclude_job_id: Optional[int] = None) -> List[Job]:
    jobs = jobs_in_range(db, start=d, end=d, worker_id=worker_id, statuses=ACTIVE_STATUSES)
    return [j for j in jobs if j.id != exclude_job_id]


def consumed_from_jobs(jobs: Iterable[Job]) -> set[Slot]:
    """Halves taken by active jobs; a job without a time takes the whole day."""
    consumed: set[Slot] = set()
    for job in jobs:
        if job.status not in ACTIVE_STATUSES:
            continue
        consumed.add(slot_for_time(job.scheduled_time))
    return consumed


def consumed_slots(db: Session, worker_id: int, d: date) -> set[Slot]:
    return consumed_from_jobs(active_jobs_on(db, worker_id, d))


def count_jobs_on(db: Session, worker_ids: Iterable[int], d: date) -> dict[int, int]:
    """Non-cancelled jobs per worker on one date, for load balancing."""
    ids = list(worker_ids)
    if not ids:
        return {}
    stmt = (
        select(Job.worker_id, func.count(Job.id))
        .where(
            Job.worker_id.in_(ids),
            Job.scheduled_date == d,
            Job.status != JobStatus.cancelled,
        )
        .group_by(Job.worker_id)
    )
    return {worker_id: count for worker_id, count in db.execute(stmt)}


# ---------- mutations ----------
# These only touch the ledger. Bookings, cancellations and reassignments that
# must keep worker availability in step go through assignment.service.

def create_job(db: Session, dto: JobCreate, *, commit: bool = True) -> Job:
    row = Job(
        worker_id=dto.worker_id,
        quote_id=dto.quote_id,
        customer_name=dto.customer_name,
        customer_phone=dto.customer_phone,
        address=dto.address,
        postcode=dto.postcode,
        job_description=dto.job_description,
        scheduled_date=dto.scheduled_date,
        scheduled_time=dto.scheduled_time,
        time_slot_type=dto.time_slot_type,
        status=JobStatus.pending,
        payout_pence=dto.payout_pence,
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    else:
        db.flush()
    return row


def transition_status(db: Session, job: Job, new_status: JobStatus, *, commit: bool = True) -> Job:
    if new_status not in ALLOWED_TRANSITIONS[job.status]:
        raise HTTPException(
            status_code=409,
            detail=f"cannot move job from {job.status.value} to {new_status.value}",
        )
    job.status = new_status
    if new_status is JobStatus.accepted:
        job.accepted_at = _now()
    elif new_status is JobStatus.completed:
        job.completed_at = _now()
    if commit:
        db.commit()
        db.refresh(job)
    else:
        db.flush()
    return job


def cancel_job(db: Session, job: Job, *, commit: bool = True) -> Job:
    return transition_status(db, job, JobStatus.cancelled, commit=commit)


def reassign_job(db: Session, job: Job, new_worker_id: int, *, commit: bool = True) -> Job:
    if job.status not in (JobStatus.pending, JobStatus.accepted):
        raise HTTPException(status_code=409, detail=f"cannot reassign a job that is {job.status.value}")
    job.worker_id = new_worker_id
    job.status = JobStatus.pending
    job.accepted_at = None
    if commit:
        db.commit()
        db.refresh(job)
    else:
        db.flush()
    return job
