import logging
from datetime import date, time, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from bookly.core.config import settings
from bookly.models.experience import Experience
from bookly.models.promo_code import PromoCode, DiscountType
from bookly.models.slot import Slot

logger = logging.getLogger(__name__)

DEMO_EXPERIENCES = [
    {
        "title": "Kayaking",
        "short_description": "Curated small-group experience. Certified guide. Safety first with gear included.",
        "location": "Udupi",
        "category": "Adventure",
        "price": Decimal("999"),
        "duration": "3 hours",
        "capacity": 10,
        "rating": Decimal("4.8"),
        "total_reviews": 128,
    },
    {
        "title": "Nandi Hills Sunrise",
        "short_description": "Early-morning drive and guided walk to catch the sunrise.",
        "location": "Bangalore",
        "category": "Nature",
        "price": Decimal("899"),
        "duration": "5 hours",
        "capacity": 12,
        "rating": Decimal("4.6"),
        "total_reviews": 94,
    },
    {
        "title": "Coffee Trail",
        "short_description": "Walk the estates, learn the roast, taste the cup.",
        "location": "Coorg",
        "category": "Food & Drink",
        "price": Decimal("1299"),
        "duration": "4 hours",
        "capacity": 8,
        "rating": Decimal("4.7"),
        "total_reviews": 61,
    },
]

# (start time, price multiplier)
DEMO_SLOT_TIMES = [
    (time(7, 0), Decimal("1.00")),
    (time(9, 0), Decimal("1.00")),
    (time(11, 0), Decimal("1.00")),
    (time(13, 0), Decimal("1.20")),
]

DEMO_PROMO_CODES = [
    {"code": "SAVE10", "discount_type": DiscountType.percentage, "discount_value": Decimal("10"),
     "max_discount": Decimal("500"), "min_amount": Decimal("500")},
    {"code": "FLAT100", "discount_type": DiscountType.flat, "discount_value": Decimal("100"),
     "min_amount": Decimal("0"), "usage_limit": 100},
]

DEMO_DAYS = 5
SLOT_CAPACITY = 8


def seed_demo_data(db: Session, start: date = None) -> int:
    """Insert demo experiences, slots and promo codes that are not there yet. Returns rows added."""
    start = start or date.today()
    added = 0

    existing = {e.title for e in db.query(Experience).all()}
    for payload in DEMO_EXPERIENCES:
        if payload["title"] in existing:
            continue
        experience = Experience(description=payload["short_description"], **payload)
        for offset in range(DEMO_DAYS):
            for start_time, multiplier in DEMO_SLOT_TIMES:
                experience.slots.append(Slot(
                    date=start + timedelta(days=offset),
                    time=start_time,
                    available_capacity=SLOT_CAPACITY,
                    total_capacity=SLOT_CAPACITY,
                    price_multiplier=multiplier,
                    is_available=True,
                ))
                added += 1
        db.add(experience)
        added += 1

    codes = {p.code for p in db.query(PromoCode).all()}
    for payload in DEMO_PROMO_CODES:
        if payload["code"] not in codes:
            db.add(PromoCode(**payload))
            added += 1

    db.commit()
    logger.info("Seeded %d demo row(s).", added)
    return added


if __name__ == "__main__":
    from bookly.db.init_db import init_db
    from bookly.db.session import SessionLocal

    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
    db = SessionLocal()
    try:
        seed_demo_data(db)
    finally:
        db.close()
