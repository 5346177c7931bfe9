from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db

from .schema import SelectBookingPayload, QuoteBookingResponse, QuoteSchema
from . import service

quote_router = APIRouter(prefix="/quotes", tags=["Quotes"])


# Public: the customer picks a package and a date on the quote page
@quote_router.post("/{quote_id}/select-booking", response_model=QuoteBookingResponse)
def select_booking(quote_id: int, payload: SelectBookingPayload, db: Session = Depends(get_db)):
    quote, result = service.select_booking(db, quote_id, payload)
    return QuoteBookingResponse(**QuoteSchema.model_validate(quote).model_dump(), assignment=result)
