import logging
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import case, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookly.core.config import settings
from bookly.core.exceptions import (
    BooklyError,
    CapacityError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from bookly.models.booking import Booking
from bookly.models.experience import Experience
from bookly.models.promo_code import PromoCode
from bookly.models.slot import Slot
from bookly.schemas.booking import BookingCreate
from bookly.utils.booking_reference import generate_booking_reference, is_booking_reference
from bookly.utils.pricing import base_price, clamp_discount
from bookly.utils.promo import canonical_code, check_promo, find_active_promo

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS = (
    "experience_id",
    "slot_id",
    "customer_name",
    "customer_email",
    "customer_phone",
    "num_people",
)

# Column widths of the bookings table
MAX_LENGTHS = {
    "customer_name": 255,
    "customer_email": 255,
    "customer_phone": 30,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_booking_input(data: BookingCreate) -> None:
    missing = {}
    for field in REQUIRED_FIELDS:
        value = getattr(data, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing[field] = "This field is required"
    if missing:
        raise ValidationError("Missing required fields", errors=missing)

    errors = {}
    for field, limit in MAX_LENGTHS.items():
        if len(getattr(data, field).strip()) > limit:
            errors[field] = f"Must be at most {limit} characters"
    if "customer_email" not in errors and not EMAIL_RE.match(data.customer_email.strip()):
        errors["customer_email"] = "Invalid email format"
    if data.num_people < 1:
        errors["num_people"] = "At least one person is required"
    if errors:
        raise ValidationError("Invalid booking details", errors=errors)


def _claim_promo(db: Session, code: str, amount: Decimal, clamp: bool) -> Tuple[Optional[str], Decimal]:
    """
    Apply a promo to a booking amount and count one use of it.

    Returns ``(code, discount)``, or ``(None, 0)`` when the code cannot be
    used; an unusable code never blocks the booking. The usage counter is
    bumped with a conditional UPDATE so that two bookings racing for the last
    use of a capped promo cannot both claim it.
    """
    no_discount = (None, Decimal("0"))

    promo = find_active_promo(db, code)
    if not promo:
        logger.warning("Promo code %s not found, booking without discount", canonical_code(code))
        return no_discount

    outcome = check_promo(promo, amount)
    if not outcome.valid:
        logger.warning("Promo code %s not applied: %s", promo.code, outcome.message)
        return no_discount

    claimed = (
        db.query(PromoCode)
        .filter(
            PromoCode.id == promo.id,
            PromoCode.is_active == True,
            or_(
                PromoCode.usage_limit == None,  # noqa: E711
                PromoCode.usage_count < PromoCode.usage_limit,
            ),
        )
        .update({PromoCode.usage_count: PromoCode.usage_count + 1}, synchronize_session=False)
    )
    if claimed != 1:
        logger.warning("Promo code %s reached its usage limit concurrently", promo.code)
        return no_discount

    discount = outcome.discount_amount
    if clamp:
        discount = clamp_discount(discount, amount)
    return promo.code, discount


def _reserve_capacity(db: Session, slot_id, num_people: int) -> bool:
    """Decrement a slot's capacity only if enough seats remain. Returns False when they don't."""
    remaining = Slot.available_capacity - num_people
    reserved = (
        db.query(Slot)
        .filter(Slot.id == slot_id, Slot.available_capacity >= num_people)
        .update(
            {
                Slot.available_capacity: remaining,
                Slot.is_available: case((remaining > 0, True), else_=False),
            },
            synchronize_session=False,
        )
    )
    return reserved == 1


def _release_capacity(db: Session, slot_id, num_people: int) -> None:
    restored = Slot.available_capacity + num_people
    db.query(Slot).filter(Slot.id == slot_id).update(
        {
            Slot.available_capacity: case(
                (restored > Slot.total_capacity, Slot.total_capacity), else_=restored
            ),
            Slot.is_available: True,
        },
        synchronize_session=False,
    )


def _insert_booking(db: Session, data: BookingCreate, clamp: bool) -> Booking:
    """All the writes of one booking attempt. The caller owns commit/rollback."""
    slot = (
        db.query(Slot)
        .filter(Slot.id == data.slot_id, Slot.experience_id == data.experience_id)
        .first()
    )
    if not slot:
        raise NotFoundError("Slot not found")

    num_people = data.num_people
    if slot.available_capacity < num_people:
        raise CapacityError("Not enough capacity available")

    experience = (
        db.query(Experience)
        .filter(Experience.id == data.experience_id, Experience.is_active == True)
        .first()
    )
    if not experience:
        raise NotFoundError("Experience not found")

    total_price = base_price(experience.price, num_people, slot.price_multiplier)

    promo_code, discount = None, Decimal("0")
    if data.promo_code:
        promo_code, discount = _claim_promo(db, data.promo_code, total_price, clamp)

    booking = Booking(
        experience_id=experience.id,
        slot_id=slot.id,
        customer_name=data.customer_name.strip(),
        customer_email=data.customer_email.strip(),
        customer_phone=data.customer_phone.strip(),
        num_people=num_people,
        total_price=total_price - discount,
        promo_code=promo_code,
        discount_amount=discount,
        status="confirmed",
        booking_reference=generate_booking_reference(),
    )
    db.add(booking)
    db.flush()

    # The capacity read above may be stale by now; this is the check that counts
    if not _reserve_capacity(db, slot.id, num_people):
        logger.warning(
            "Slot %s sold out while booking %s was in flight", slot.id, booking.booking_reference
        )
        raise CapacityError("Not enough capacity available")

    return booking


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------


def create_booking(db: Session, data: BookingCreate, clamp_flat_discount: Optional[bool] = None) -> Booking:
    """
    Book ``num_people`` seats on a slot.

    Slot lookup, capacity check, pricing, promo usage, booking insert and the
    capacity decrement run in one transaction: either all of them are
    committed or none is. A clash on the generated booking reference retries
    the whole transaction with a fresh reference.
    """
    _check_booking_input(data)
    clamp = settings.CLAMP_FLAT_DISCOUNT if clamp_flat_discount is None else clamp_flat_discount
    attempts = max(1, settings.BOOKING_REFERENCE_ATTEMPTS)

    for attempt in range(1, attempts + 1):
        try:
            booking = _insert_booking(db, data, clamp)
            db.commit()
        except BooklyError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            if attempt < attempts:
                logger.warning("Booking insert conflicted, retrying (%d/%d)", attempt, attempts)
                continue
            logger.exception("Booking insert kept conflicting after %d attempts", attempts)
            raise PersistenceError("Failed to create booking") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to create booking for slot %s", data.slot_id)
            raise PersistenceError("Failed to create booking") from e

        db.refresh(booking)
        logger.info(
            "Booking %s confirmed: slot=%s people=%d total=%s promo=%s",
            booking.booking_reference,
            booking.slot_id,
            booking.num_people,
            booking.total_price,
            booking.promo_code or "-",
        )
        return booking


def get_booking(db: Session, reference: str) -> Booking:
    reference = (reference or "").strip().upper()
    if not is_booking_reference(reference):
        raise NotFoundError("Booking not found")

    booking = db.query(Booking).filter(Booking.booking_reference == reference).first()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def cancel_booking(db: Session, reference: str, customer_email: str) -> Booking:
    """
    Cancel a confirmed booking and give its seats back to the slot.

    The email must match the one the booking was made with. Promo usage is
    not returned.
    """
    booking = get_booking(db, reference)
    if booking.customer_email.strip().lower() != (customer_email or "").strip().lower():
        raise NotFoundError("Booking not found")
    if booking.status != "confirmed":
        raise ConflictError(
            f"Only confirmed bookings can be cancelled (current status: '{booking.status}')"
        )

    try:
        cancelled = (
            db.query(Booking)
            .filter(Booking.id == booking.id, Booking.status == "confirmed")
            .update(
                {Booking.status: "cancelled", Booking.cancelled_at: datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )
        if cancelled != 1:
            raise ConflictError("Booking was cancelled by another request")
        _release_capacity(db, booking.slot_id, booking.num_people)
        db.commit()
    except BooklyError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to cancel booking %s", booking.booking_reference)
        raise PersistenceError("Failed to cancel booking") from e

    db.refresh(booking)
    logger.info("Booking %s cancelled, %d seat(s) released", booking.booking_reference, booking.num_people)
    return booking
