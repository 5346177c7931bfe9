from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_admin
from job.schema import JobSchema

from .schema import AssignRequest, AssignmentResult, ReassignPayload
from . import service
from .auto_assign_service import assign as auto_assign_service


assignment_router = APIRouter(prefix="/assignments", tags=["Assignments"])


@assignment_router.post("/auto-assign", response_model=AssignmentResult)
def run_auto_assign(
    payload: AssignRequest,
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    return auto_assign_service(db, payload)


@assignment_router.post("/{job_id}/reassign", response_model=JobSchema)
def reassign_job(
    job_id: int,
    payload: ReassignPayload,
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    return service.reassign(db, job_id, payload.worker_id)


@assignment_router.post("/{job_id}/cancel", response_model=JobSchema)
def cancel_job(
    job_id: int,
    db: Session = Depends(get_db),
    _admin = Depends(require_admin),
    ):
    return service.cancel(db, job_id)
