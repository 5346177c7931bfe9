from __future__ import annotations
from datetime import date, time, datetime
from sqlalchemy import Integer, Boolean, Date, Time, String, DateTime, JSON, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class MasterDayPattern(Base):
    __tablename__ = "master_day_patterns"

    id: Mapped[int] = mapped_column(primary_key=True)

    # 0=Sun .. 6=Sat
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    start_time: Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)
    end_time:   Mapped[time | None] = mapped_column(Time(timezone=False), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_master_day_of_week"),
    )


class MasterBlockedDate(Base):
    __tablename__ = "master_blocked_dates"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[date] = mapped_column(Date(), nullable=False, unique=True, index=True)
    reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # None blocks the whole day; a list blocks only those slot tokens
    blocked_slots: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
