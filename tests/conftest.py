import os

# Point settings at SQLite before any bookly module builds the engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, time, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bookly.db.base import Base
from bookly.db.session import get_db
from bookly.main import app
from bookly.models.experience import Experience
from bookly.models.promo_code import PromoCode, DiscountType
from bookly.models.slot import Slot
from bookly.schemas.booking import BookingCreate


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so that separate sessions get separate connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookly-test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_experience(db):
    def _make(**overrides):
        fields = {
            "title": "Kayaking",
            "short_description": "Paddle through the mangroves.",
            "location": "Udupi",
            "category": "Adventure",
            "price": Decimal("1000"),
            "capacity": 10,
            "rating": Decimal("4.5"),
            "is_active": True,
        }
        fields.update(overrides)
        experience = Experience(**fields)
        db.add(experience)
        db.commit()
        db.refresh(experience)
        return experience

    return _make


@pytest.fixture
def make_slot(db):
    def _make(experience, **overrides):
        capacity = overrides.pop("capacity", 5)
        fields = {
            "experience_id": experience.id,
            "date": date.today() + timedelta(days=1),
            "time": time(9, 0),
            "available_capacity": capacity,
            "total_capacity": capacity,
            "price_multiplier": Decimal("1.00"),
            "is_available": True,
        }
        fields.update(overrides)
        slot = Slot(**fields)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make


@pytest.fixture
def make_promo(db):
    def _make(**overrides):
        fields = {
            "code": "SAVE10",
            "discount_type": DiscountType.percentage,
            "discount_value": Decimal("10"),
            "max_discount": None,
            "min_amount": Decimal("0"),
            "usage_count": 0,
            "usage_limit": None,
            "is_active": True,
        }
        fields.update(overrides)
        promo = PromoCode(**fields)
        db.add(promo)
        db.commit()
        db.refresh(promo)
        return promo

    return _make


@pytest.fixture
def booking_payload():
    """Build the POST /bookings body for a slot."""
    def _payload(slot, **overrides):
        body = {
            "experience_id": str(slot.experience_id),
            "slot_id": str(slot.id),
            "customer_name": "Asha Rao",
            "customer_email": "asha@example.com",
            "customer_phone": "+91 98450 00000",
            "num_people": 1,
        }
        body.update(overrides)
        return body

    return _payload


@pytest.fixture
def booking_data(booking_payload):
    def _data(slot, **overrides):
        return BookingCreate(**booking_payload(slot, **overrides))

    return _data
