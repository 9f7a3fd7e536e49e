from bookly.schemas.common import ErrorResponse, ValidationErrorResponse, HealthResponse, Money
from bookly.schemas.experience import Experience, ExperienceDetail, Slot
from bookly.schemas.booking import (
    Booking, BookingCreate, BookingCancel, BookingQuote, BookingQuoteRequest,
)
from bookly.schemas.promo_code import PromoValidateRequest, PromoValidateResponse
