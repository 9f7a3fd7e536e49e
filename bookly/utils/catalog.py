from datetime import date
from uuid import UUID
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from bookly.core.config import settings
from bookly.core.exceptions import NotFoundError, ValidationError
from bookly.models.experience import Experience
from bookly.models.slot import Slot
from bookly.utils.pricing import PriceQuote, base_price, clamp_discount, quote_price
from bookly.utils.promo import PromoValidation, validate_promo


def list_experiences(db: Session) -> List[Experience]:
    """Active experiences, best rated first."""
    return (
        db.query(Experience)
        .filter(Experience.is_active == True)
        .order_by(Experience.rating.desc(), Experience.title)
        .all()
    )


def get_experience(db: Session, experience_id, today: Optional[date] = None) -> Tuple[Experience, List[Slot]]:
    """
    Return an active experience together with its bookable slots.

    Slots are those still available and dated today or later, in date/time
    order. An experience without such slots is returned with an empty list.
    """
    try:
        experience_id = UUID(str(experience_id))
    except ValueError:
        raise NotFoundError("Experience not found")

    experience = (
        db.query(Experience)
        .filter(Experience.id == experience_id, Experience.is_active == True)
        .first()
    )
    if not experience:
        raise NotFoundError("Experience not found")

    # slot dates are stored as naive local dates
    today = today or date.today()
    slots = (
        db.query(Slot)
        .filter(
            Slot.experience_id == experience.id,
            Slot.is_available == True,
            Slot.date >= today,
        )
        .order_by(Slot.date, Slot.time)
        .all()
    )
    return experience, slots


def quote_booking(
    db: Session,
    experience_id,
    slot_id,
    num_people: int,
    promo_code: Optional[str] = None,
    clamp_flat_discount: Optional[bool] = None,
) -> Tuple[PriceQuote, Optional[PromoValidation]]:
    """Price a prospective booking the way checkout shows it. Nothing is written."""
    if num_people < 1:
        raise ValidationError("Invalid booking details", errors={"num_people": "At least one person is required"})

    experience = (
        db.query(Experience)
        .filter(Experience.id == experience_id, Experience.is_active == True)
        .first()
    )
    if not experience:
        raise NotFoundError("Experience not found")

    slot = db.query(Slot).filter(Slot.id == slot_id, Slot.experience_id == experience.id).first()
    if not slot:
        raise NotFoundError("Slot not found")

    promo = None
    discount = 0
    if promo_code:
        amount = base_price(experience.price, num_people, slot.price_multiplier)
        promo = validate_promo(db, promo_code, amount)
        if promo.valid:
            discount = promo.discount_amount
            clamp = settings.CLAMP_FLAT_DISCOUNT if clamp_flat_discount is None else clamp_flat_discount
            if clamp:
                discount = clamp_discount(discount, amount)

    return quote_price(experience.price, num_people, slot.price_multiplier, discount), promo
