from typing import Optional
from pydantic import BaseModel, UUID4, field_validator
from datetime import datetime

from bookly.schemas.common import Money


# Booking — Create (POST /bookings)
# Every field is optional here so that missing fields reach the booking
# coordinator and come back as a single "Missing required fields" error.
class BookingCreate(BaseModel):
    experience_id: Optional[UUID4] = None
    slot_id: Optional[UUID4] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    num_people: Optional[int] = None
    promo_code: Optional[str] = None

    @field_validator("experience_id", "slot_id", "promo_code", mode="before")
    @classmethod
    def parse_empty_str_to_none(cls, v):
        if v == "":
            return None
        return v


# Booking — Full response (POST /bookings, GET /bookings/{reference})
class Booking(BaseModel):
    id: UUID4
    experience_id: UUID4
    slot_id: UUID4
    customer_name: str
    customer_email: str
    customer_phone: str
    num_people: int
    total_price: Money
    promo_code: Optional[str] = None
    discount_amount: Money
    status: str
    booking_reference: str
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Booking — Cancel (POST /bookings/{reference}/cancel)
class BookingCancel(BaseModel):
    customer_email: str


# Price quote (POST /bookings/quote)
class BookingQuoteRequest(BaseModel):
    experience_id: UUID4
    slot_id: UUID4
    num_people: int = 1
    promo_code: Optional[str] = None


class BookingQuote(BaseModel):
    experience_id: UUID4
    slot_id: UUID4
    num_people: int
    base: Money
    discount: Money
    subtotal: Money
    taxes: Money
    total: Money
    promo_code: Optional[str] = None
    promo_message: Optional[str] = None
