"""
Request identity. Authentication itself lives in the gateway in front of this
service; it forwards who the caller is in headers, and these dependencies turn
that into a principal and enforce the admin / worker split.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException


@dataclass
class Principal:
    id: int
    role: str
    worker_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_current_user(
    x_user_id: Optional[int] = Header(None),
    x_user_role: Optional[str] = Header(None),
    x_worker_id: Optional[int] = Header(None),
) -> Principal:
    if x_user_id is None or not x_user_role:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return Principal(id=x_user_id, role=x_user_role, worker_id=x_worker_id)


def require_admin(user: Principal = Depends(get_current_user)) -> Principal:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user


def require_worker_access(worker_id: int, user: Principal = Depends(get_current_user)) -> Principal:
    # Admins manage everyone; workers only their own calendar
    if user.is_admin or user.worker_id == worker_id:
        return user
    raise HTTPException(status_code=403, detail="cannot access another worker's availability")
