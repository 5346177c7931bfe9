from __future__ import annotations
from datetime import date, time, datetime
from enum import Enum
from sqlalchemy import Integer, String, Text, Date, Time, DateTime, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base


class JobStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


# Statuses that still occupy the worker's time
ACTIVE_STATUSES = (JobStatus.pending, JobStatus.accepted, JobStatus.in_progress)


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(primary_key=True)
    worker_id: Mapped[int] = mapped_column(ForeignKey("workers.id", ondelete="RESTRICT"), index=True)
    quote_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(Text(), nullable=True)
    postcode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    job_description: Mapped[str] = mapped_column(Text(), nullable=False)

    scheduled_date: Mapped[date] = mapped_column(Date(), nullable=False)
    # None means the job takes the whole day
    scheduled_time: Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)
    # am / pm / full / exact when booked through the assignment engine
    time_slot_type: Mapped[str | None] = mapped_column(String(8), nullable=True)

    status: Mapped[JobStatus] = mapped_column(
        SAEnum(JobStatus, name="job_status"), nullable=False, default=JobStatus.pending
    )
    payout_pence: Mapped[int | None] = mapped_column(Integer, nullable=True)

    accepted_at:  Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    worker = relationship("Worker")

Index("ix_jobs_worker_date", Job.worker_id, Job.scheduled_date)
Index("ix_jobs_date", Job.scheduled_date)
