from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bookly.db.session import get_db
from bookly.schemas.booking import (
    BookingCreate,
    Booking as BookingSchema,
    BookingCancel,
    BookingQuote,
    BookingQuoteRequest,
)
from bookly.schemas.common import ErrorResponse, ValidationErrorResponse
from bookly.utils.bookings import cancel_booking, create_booking, get_booking
from bookly.utils.catalog import quote_booking

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# POST /bookings — create / confirm a booking
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=BookingSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def create_booking_endpoint(data: BookingCreate, db: Session = Depends(get_db)):
    """
    Confirm a booking for `num_people` on a slot.

    - Total = experience price × num_people × slot price multiplier, less any promo discount.
    - A promo code that can no longer be used is ignored; the booking still goes through.
    - The slot's remaining capacity is decremented in the same transaction.
    """
    booking = create_booking(db, data)
    return BookingSchema.model_validate(booking)


# ---------------------------------------------------------------------------
# POST /bookings/quote — checkout summary
# ---------------------------------------------------------------------------


@router.post("/quote", response_model=BookingQuote, responses={404: {"model": ErrorResponse}})
def quote_booking_endpoint(data: BookingQuoteRequest, db: Session = Depends(get_db)):
    """Subtotal, discount, taxes and total for a prospective booking. Taxes are on the pre-discount price."""
    quote, promo = quote_booking(db, data.experience_id, data.slot_id, data.num_people, data.promo_code)
    return BookingQuote(
        experience_id=data.experience_id,
        slot_id=data.slot_id,
        num_people=data.num_people,
        base=quote.base,
        discount=quote.discount,
        subtotal=quote.subtotal,
        taxes=quote.taxes,
        total=quote.total,
        promo_code=data.promo_code.strip().upper() if promo and promo.valid else None,
        promo_message=promo.message if promo else None,
    )


# ---------------------------------------------------------------------------
# GET /bookings/{reference}
# ---------------------------------------------------------------------------


@router.get("/{booking_reference}", response_model=BookingSchema, responses={404: {"model": ErrorResponse}})
def read_booking(booking_reference: str, db: Session = Depends(get_db)):
    return BookingSchema.model_validate(get_booking(db, booking_reference))


# ---------------------------------------------------------------------------
# POST /bookings/{reference}/cancel
# ---------------------------------------------------------------------------


@router.post(
    "/{booking_reference}/cancel",
    response_model=BookingSchema,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def cancel_booking_endpoint(booking_reference: str, data: BookingCancel, db: Session = Depends(get_db)):
    """
    Cancel a confirmed booking.
    - The email must match the booking's customer email.
    - Frees the seats on the time slot.
    """
    booking = cancel_booking(db, booking_reference, data.customer_email)
    return BookingSchema.model_validate(booking)
