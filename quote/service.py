from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from assignment.auto_assign_service import assign
from assignment.schema import AssignRequest, AssignmentResult
from .models import Quote
from .schema import SelectBookingPayload

logger = logging.getLogger(__name__)


def get_quote(db: Session, quote_id: int) -> Optional[Quote]:
    return db.get(Quote, quote_id)


def require_quote(db: Session, quote_id: int) -> Quote:
    quote = db.get(Quote, quote_id)
    if not quote:
        raise HTTPException(status_code=404, detail="quote not found")
    return quote


def select_booking(db: Session, quote_id: int, payload: SelectBookingPayload) -> tuple[Quote, AssignmentResult]:
    """
    Record the customer's package and date on the quote, then try to book a
    worker. The selection is kept even when no worker could be assigned; the
    assignment result says why and the job can be placed by hand.
    """
    quote = require_quote(db, quote_id)
    if quote.job_id is not None:
        raise HTTPException(status_code=409, detail="a booking has already been made for this quote")

    quote.selected_package = payload.selected_package
    quote.selected_at = datetime.now(timezone.utc)
    quote.selected_date = payload.selected_date
    quote.time_slot_type = payload.time_slot_type
    quote.exact_time_requested = payload.exact_time_requested
    db.commit()

    service_ids = payload.service_ids if payload.service_ids is not None else (quote.service_ids or [])
    result = assign(db, AssignRequest(
        quote_id=quote.id,
        customer_name=quote.customer_name,
        customer_phone=quote.phone,
        address=quote.address,
        postcode=quote.postcode,
        job_description=quote.job_description,
        date=payload.selected_date,
        time_slot_type=payload.time_slot_type,
        exact_time=payload.exact_time_requested,
        required_service_ids=list(service_ids),
    ))

    if result.assigned:
        quote.job_id = result.job_id
        db.commit()
    else:
        logger.warning("Quote %s booked for %s without a worker: %s", quote.id, payload.selected_date, result.reason)

    db.refresh(quote)
    return quote, result
