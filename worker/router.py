from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import get_current_user, require_admin
from .schema import WorkerSchema, WorkerDetailSchema, WorkerCreatePayload, WorkerUpdate, WorkerSkillsPayload
from . import service

worker_router = APIRouter(prefix="/workers", tags=["Workers"])


def _detail(db: Session, worker) -> WorkerDetailSchema:
    base = WorkerSchema.model_validate(worker).model_dump()
    return WorkerDetailSchema(**base, service_ids=service.get_skill_ids(db, worker.id))


# List all workers
@worker_router.get("", response_model=list[WorkerSchema])
def list_workers(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return service.get_workers(db)


# Get worker by id
@worker_router.get("/{worker_id}", response_model=WorkerDetailSchema)
def worker_detail(worker_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    obj = service.get_worker(db, worker_id)
    if not obj:
        raise HTTPException(status_code=404, detail="worker not found")
    return _detail(db, obj)


# Create worker (admin only)
@worker_router.post("", response_model=WorkerDetailSchema, status_code=status.HTTP_201_CREATED)
def worker_post(payload: WorkerCreatePayload, db: Session = Depends(get_db), _admin=Depends(require_admin)):
    return _detail(db, service.create_worker(db, payload))


# Update worker (admin only)
@worker_router.patch("/{worker_id}", response_model=WorkerSchema)
def worker_patch(worker_id: int, payload: WorkerUpdate, db: Session = Depends(get_db), _admin=Depends(require_admin)):
    obj = service.update_worker(db, worker_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="worker not found")
    return obj


# Replace a worker's skills (admin only)
@worker_router.put("/{worker_id}/skills", response_model=list[str])
def worker_skills_put(worker_id: int, payload: WorkerSkillsPayload, db: Session = Depends(get_db), _admin=Depends(require_admin)):
    return service.set_skills(db, worker_id, payload.service_ids)
