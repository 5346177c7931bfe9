from __future__ import annotations
from datetime import date, time
from sqlalchemy import Integer, Boolean, Date, Time, Text, ForeignKey, CheckConstraint, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class WorkerWeeklyPattern(Base):
    __tablename__ = "worker_weekly_patterns"

    id: Mapped[int] = mapped_column(primary_key=True)
    worker_id: Mapped[int] = mapped_column(ForeignKey("workers.id", ondelete="CASCADE"), index=True)

    # 0=Sun .. 6=Sat
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    start_time: Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)
    end_time:   Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_worker_weekly_day"),
        UniqueConstraint("worker_id", "day_of_week", name="uq_worker_weekly_day"),
    )


class WorkerDateOverride(Base):
    __tablename__ = "worker_date_overrides"

    id: Mapped[int] = mapped_column(primary_key=True)
    worker_id: Mapped[int] = mapped_column(ForeignKey("workers.id", ondelete="CASCADE"), index=True)
    date: Mapped[date] = mapped_column(Date(), nullable=False)

    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_time: Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)
    end_time:   Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text(), nullable=True)

    # Booking hold bookkeeping: the window as it was before the first booking
    # narrowed it, so cancel/reassign can put it back.
    booking_hold: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by_booking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    base_is_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    base_start_time: Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)
    base_end_time:   Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("worker_id", "date", name="uq_worker_override_date"),
        Index("ix_worker_override_date", "date"),
    )
