from __future__ import annotations
from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import Principal, get_current_user, require_worker_access
from assignment import service as assignment_service

from .models import JobStatus
from .schema import JobSchema, JobStatusUpdate
from . import service

job_router = APIRouter(prefix="/jobs", tags=["Jobs"])


@job_router.get("", response_model=List[JobSchema])
def list_jobs(
    worker_id: Optional[int] = Query(None),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    status: Optional[JobStatus] = Query(None),
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
    ):
    # Workers only ever see their own jobs
    if not user.is_admin:
        worker_id = user.worker_id
        if worker_id is None:
            raise HTTPException(status_code=403, detail="Not allowed")
    start = start or date.min
    end = end or date.max
    if start > end:
        raise HTTPException(status_code=422, detail="start must be on or before end")
    return service.jobs_in_range(
        db,
        start=start,
        end=end,
        worker_id=worker_id,
        statuses=[status] if status is not None else None,
    )


@job_router.get("/{job_id}", response_model=JobSchema)
def get_job(job_id: int, db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    job = service.require_job(db, job_id)
    require_worker_access(job.worker_id, user)
    return job


@job_router.patch("/{job_id}/status", response_model=JobSchema)
def update_job_status(
    job_id: int,
    payload: JobStatusUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
    ):
    job = service.require_job(db, job_id)
    require_worker_access(job.worker_id, user)
    if payload.status is JobStatus.cancelled:
        return assignment_service.cancel(db, job_id)
    return service.transition_status(db, job, payload.status)
