from __future__ import annotations
from datetime import date, time, datetime
from sqlalchemy import Integer, String, Text, Date, Time, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


class Quote(Base):
    """Booking-relevant slice of a customer quote."""
    __tablename__ = "quotes"

    id: Mapped[int] = mapped_column(primary_key=True)
    short_slug: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    postcode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    job_description: Mapped[str] = mapped_column(Text, nullable=False)

    # ids from the external service registry
    service_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    selected_package: Mapped[str | None] = mapped_column(String(32), nullable=True)
    selected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    selected_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    time_slot_type: Mapped[str | None] = mapped_column(String(8), nullable=True)
    exact_time_requested: Mapped[time | None] = mapped_column(Time, nullable=True)

    job_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
