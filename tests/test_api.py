from datetime import datetime, timedelta, timezone
from decimal import Decimal
import uuid

from bookly.core.config import settings
from bookly.models.booking import Booking
from bookly.models.promo_code import DiscountType

API = settings.API_V1_STR


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def test_list_experiences(client, make_experience, make_slot):
    top = make_experience(title="Top", rating=Decimal("4.9"))
    make_slot(top)
    make_experience(title="Second", rating=Decimal("4.1"))

    resp = client.get(f"{API}/experiences")

    assert resp.status_code == 200
    body = resp.json()
    assert [e["title"] for e in body] == ["Top", "Second"]
    assert "slots" not in body[0]
    assert body[0]["price"] == 1000


def test_get_experience_with_slots(client, make_experience, make_slot):
    experience = make_experience()
    slot = make_slot(experience, price_multiplier=Decimal("1.25"))

    resp = client.get(f"{API}/experiences/{experience.id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == str(experience.id)
    assert [s["id"] for s in body["slots"]] == [str(slot.id)]
    assert body["slots"][0]["price_multiplier"] == 1.25


def test_get_experience_by_query_param(client, make_experience):
    experience = make_experience()

    resp = client.get(f"{API}/experiences", params={"id": str(experience.id)})

    assert resp.status_code == 200
    assert resp.json()["slots"] == []


def test_get_experience_not_found(client, make_experience):
    inactive = make_experience(is_active=False)

    for experience_id in (inactive.id, uuid.uuid4()):
        resp = client.get(f"{API}/experiences/{experience_id}")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Experience not found"}


def test_malformed_experience_id_is_not_found(client):
    for resp in (
        client.get(f"{API}/experiences", params={"id": "not-a-uuid"}),
        client.get(f"{API}/experiences/not-a-uuid"),
    ):
        assert resp.status_code == 404
        assert resp.json() == {"error": "Experience not found"}


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


def test_create_booking(client, db, make_experience, make_slot, make_promo, booking_payload):
    slot = make_slot(make_experience(price=Decimal("1000")), capacity=6, price_multiplier=Decimal("1.5"))
    promo = make_promo(code="SAVE10", max_discount=Decimal("500"))

    resp = client.post(f"{API}/bookings", json=booking_payload(slot, num_people=4, promo_code="save10"))

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "confirmed"
    assert body["total_price"] == 5500
    assert body["discount_amount"] == 500
    assert body["promo_code"] == "SAVE10"
    assert body["booking_reference"].startswith("BK")

    db.refresh(slot)
    db.refresh(promo)
    assert slot.available_capacity == 2
    assert promo.usage_count == 1


def test_create_booking_missing_fields(client, make_experience, make_slot, booking_payload):
    slot = make_slot(make_experience())
    payload = booking_payload(slot)
    del payload["customer_phone"]

    resp = client.post(f"{API}/bookings", json=payload)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields"
    assert "customer_phone" in resp.json()["errors"]


def test_create_booking_overlong_phone(client, db, make_experience, make_slot, booking_payload):
    slot = make_slot(make_experience())

    resp = client.post(f"{API}/bookings", json=booking_payload(slot, customer_phone="+" + "9" * 30))

    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Invalid booking details",
        "errors": {"customer_phone": "Must be at most 30 characters"},
    }
    assert db.query(Booking).count() == 0


def test_create_booking_malformed_body(client, make_experience, make_slot, booking_payload):
    slot = make_slot(make_experience())

    resp = client.post(f"{API}/bookings", json=booking_payload(slot, num_people="many"))

    assert resp.status_code == 400
    assert "num_people" in resp.json()["errors"]


def test_create_booking_slot_not_found(client, make_experience, make_slot, booking_payload):
    slot = make_slot(make_experience())

    resp = client.post(f"{API}/bookings", json=booking_payload(slot, slot_id=str(uuid.uuid4())))

    assert resp.status_code == 404
    assert resp.json() == {"error": "Slot not found"}


def test_create_booking_over_capacity(client, db, make_experience, make_slot, booking_payload):
    slot = make_slot(make_experience(), capacity=1)

    first = client.post(f"{API}/bookings", json=booking_payload(slot))
    second = client.post(f"{API}/bookings", json=booking_payload(slot))

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"error": "Not enough capacity available"}
    assert db.query(Booking).count() == 1


def test_storage_failure_is_generic_500(client, make_experience, make_slot, booking_payload, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from bookly.utils import bookings as bookings_module

    def _broken(*args, **kwargs):
        raise OperationalError("INSERT INTO bookings", {}, Exception("disk I/O error at /var/lib/db"))

    monkeypatch.setattr(bookings_module, "_reserve_capacity", _broken)
    slot = make_slot(make_experience())

    resp = client.post(f"{API}/bookings", json=booking_payload(slot))

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to create booking"}


def test_get_and_cancel_booking(client, db, make_experience, make_slot, booking_payload):
    slot = make_slot(make_experience(), capacity=3)
    reference = client.post(f"{API}/bookings", json=booking_payload(slot, num_people=2)).json()["booking_reference"]

    assert client.get(f"{API}/bookings/{reference}").json()["num_people"] == 2

    wrong = client.post(f"{API}/bookings/{reference}/cancel", json={"customer_email": "x@y.io"})
    assert wrong.status_code == 404

    resp = client.post(f"{API}/bookings/{reference}/cancel", json={"customer_email": "asha@example.com"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"

    again = client.post(f"{API}/bookings/{reference}/cancel", json={"customer_email": "asha@example.com"})
    assert again.status_code == 409

    db.refresh(slot)
    assert slot.available_capacity == 3


def test_get_booking_malformed_reference(client):
    resp = client.get(f"{API}/bookings/not-a-reference")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Booking not found"}


def test_quote(client, make_experience, make_slot):
    slot = make_slot(make_experience(price=Decimal("1000")), price_multiplier=Decimal("1.5"))

    resp = client.post(f"{API}/bookings/quote", json={
        "experience_id": str(slot.experience_id),
        "slot_id": str(slot.id),
        "num_people": 2,
    })

    assert resp.status_code == 200
    body = resp.json()
    assert (body["base"], body["taxes"], body["total"]) == (3000, 177, 3177)


# ---------------------------------------------------------------------------
# Promo validation
# ---------------------------------------------------------------------------


def test_validate_promo(client, db, make_promo):
    promo = make_promo(code="SAVE10", max_discount=Decimal("500"))

    resp = client.post(f"{API}/promo-codes/validate", json={"code": "save10", "amount": 6000})

    assert resp.status_code == 200
    assert resp.json() == {
        "valid": True,
        "message": "Promo code applied successfully",
        "discount_type": "percentage",
        "discount_value": 10,
        "discount_amount": 500,
    }
    db.refresh(promo)
    assert promo.usage_count == 0


def test_validate_promo_failures_answer_200(client, make_promo):
    make_promo(code="OLD", valid_until=datetime.now(timezone.utc) - timedelta(days=1))
    make_promo(code="FLAT200", discount_type=DiscountType.flat, discount_value=Decimal("200"),
               min_amount=Decimal("1000"))

    cases = [
        ({"code": "OLD", "amount": 5000}, "Promo code has expired"),
        ({"code": "NOPE", "amount": 5000}, "Invalid promo code"),
        ({"code": "FLAT200", "amount": 999}, "Minimum purchase amount is 1000"),
        ({"amount": 100}, "Promo code is required"),
    ]
    for body, message in cases:
        resp = client.post(f"{API}/promo-codes/validate", json=body)
        assert resp.status_code == 200
        assert resp.json()["valid"] is False
        assert resp.json()["message"] == message


def test_validate_promo_legacy_path(client, make_promo):
    make_promo(code="FLAT200", discount_type=DiscountType.flat, discount_value=Decimal("200"))

    resp = client.post(f"{API}/validate-promo", json={"code": "flat200", "amount": 100})

    assert resp.status_code == 200
    assert resp.json()["discount_amount"] == 200


# ---------------------------------------------------------------------------
# Cross-origin and misc
# ---------------------------------------------------------------------------


def test_cors_preflight(client):
    resp = client.options(
        f"{API}/bookings",
        headers={
            "Origin": "https://shop.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


def test_cors_on_simple_request(client):
    resp = client.get(f"{API}/experiences", headers={"Origin": "https://shop.example.com"})
    assert resp.headers["access-control-allow-origin"] == "*"


def test_health(client):
    resp = client.get(f"{API}/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
