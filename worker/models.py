from __future__ import annotations
from enum import Enum
from sqlalchemy import Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base


class WorkerStatus(str, Enum):
    available = "available"
    busy = "busy"
    unavailable = "unavailable"


class Worker(Base):
    __tablename__ = "workers"

    id: Mapped[int] = mapped_column(primary_key=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)

    postcode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    radius_miles: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # None is treated the same as "available"
    availability_status: Mapped[str | None] = mapped_column(String(32), nullable=True)

    skills = relationship("WorkerSkill", back_populates="worker", cascade="all, delete-orphan")


class WorkerSkill(Base):
    __tablename__ = "worker_skills"
    # composite PK
    worker_id: Mapped[int] = mapped_column(
        ForeignKey("workers.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    service_id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)

    worker = relationship("Worker", back_populates="skills")
