from __future__ import annotations
from typing import Optional, List, Iterable

from fastapi import HTTPException
from sqlalchemy import select, delete, or_
from sqlalchemy.orm import Session

from .models import Worker, WorkerSkill, WorkerStatus
from .schema import WorkerCreatePayload, WorkerUpdate


def get_workers(db: Session) -> List[Worker]:
    stmt = select(Worker).order_by(Worker.display_name.asc(), Worker.id.asc())
    return list(db.scalars(stmt))


def get_worker(db: Session, worker_id: int) -> Optional[Worker]:
    return db.get(Worker, worker_id)


def require_worker(db: Session, worker_id: int) -> Worker:
    worker = db.get(Worker, worker_id)
    if not worker:
        raise HTTPException(status_code=404, detail="worker not found")
    return worker


def get_skill_ids(db: Session, worker_id: int) -> List[str]:
    stmt = select(WorkerSkill.service_id).where(WorkerSkill.worker_id == worker_id).order_by(WorkerSkill.service_id)
    return list(db.scalars(stmt))


def get_eligible_workers(db: Session, *, required_service_ids: Optional[Iterable[str]] = None) -> List[Worker]:
    """
    Workers that can take bookings: status "available" or unset, and when
    service ids are given, holding at least one of them (any overlap counts).
    """
    stmt = select(Worker).where(
        or_(Worker.availability_status == WorkerStatus.available.value, Worker.availability_status.is_(None))
    )
    wanted = list(required_service_ids or [])
    if wanted:
        skilled = select(WorkerSkill.worker_id).where(WorkerSkill.service_id.in_(wanted))
        stmt = stmt.where(Worker.id.in_(skilled))
    stmt = stmt.order_by(Worker.id.asc())
    return list(db.scalars(stmt))


def create_worker(db: Session, payload: WorkerCreatePayload) -> Worker:
    row = Worker(
        display_name=payload.display_name,
        postcode=payload.postcode,
        radius_miles=payload.radius_miles,
        availability_status=payload.availability_status,
    )
    row.skills = [WorkerSkill(service_id=s) for s in dict.fromkeys(payload.service_ids)]
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_worker(db: Session, worker_id: int, patch: WorkerUpdate) -> Optional[Worker]:
    row = db.get(Worker, worker_id)
    if not row:
        return None
    data = patch.model_dump(exclude_unset=True)
    for k, v in data.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def set_skills(db: Session, worker_id: int, service_ids: Iterable[str]) -> List[str]:
    require_worker(db, worker_id)
    # Replace-all, same as the weekly pattern save
    db.execute(delete(WorkerSkill).where(WorkerSkill.worker_id == worker_id))
    db.add_all([WorkerSkill(worker_id=worker_id, service_id=s) for s in dict.fromkeys(service_ids)])
    db.commit()
    return get_skill_ids(db, worker_id)
