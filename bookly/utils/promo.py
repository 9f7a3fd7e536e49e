from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from bookly.models.promo_code import PromoCode, DiscountType
from bookly.utils.pricing import to_cents


@dataclass(frozen=True)
class PromoValidation:
    valid: bool
    message: str
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None


def canonical_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def format_amount(amount) -> str:
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return str(int(amount))
    return f"{amount:.2f}"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands timestamps back without tzinfo; they are written as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def find_active_promo(db: Session, code: str) -> Optional[PromoCode]:
    return (
        db.query(PromoCode)
        .filter(PromoCode.code == canonical_code(code), PromoCode.is_active == True)
        .first()
    )


def compute_discount(promo: PromoCode, amount) -> Decimal:
    """Percentage promos are capped at max_discount; flat promos apply verbatim."""
    if promo.discount_type == DiscountType.percentage:
        discount = to_cents(Decimal(amount) * Decimal(promo.discount_value) / 100)
        if promo.max_discount is not None:
            discount = min(discount, to_cents(promo.max_discount))
        return discount
    return to_cents(promo.discount_value)


def check_promo(promo: PromoCode, amount=None, now: Optional[datetime] = None) -> PromoValidation:
    """
    Run the eligibility rules against a loaded promo, first failure wins:
    window start, window end, usage cap, minimum amount.

    When ``amount`` is None the minimum-amount rule is skipped and the
    discount is reported as zero.
    """
    now = now or datetime.now(timezone.utc)

    valid_from = _as_utc(promo.valid_from)
    if valid_from is not None and now < valid_from:
        return PromoValidation(valid=False, message="Promo code not yet valid")

    valid_until = _as_utc(promo.valid_until)
    if valid_until is not None and now > valid_until:
        return PromoValidation(valid=False, message="Promo code has expired")

    if promo.usage_limit is not None and promo.usage_count >= promo.usage_limit:
        return PromoValidation(valid=False, message="Promo code usage limit reached")

    if amount is not None and Decimal(amount) < Decimal(promo.min_amount or 0):
        return PromoValidation(
            valid=False,
            message=f"Minimum purchase amount is {format_amount(promo.min_amount)}",
        )

    discount = compute_discount(promo, amount) if amount is not None else Decimal("0")
    return PromoValidation(
        valid=True,
        message="Promo code applied successfully",
        discount_type=DiscountType(promo.discount_type).value,
        discount_value=Decimal(promo.discount_value),
        discount_amount=discount,
    )


def validate_promo(db: Session, code: Optional[str], amount=None, now: Optional[datetime] = None) -> PromoValidation:
    """Check a promo code for an order amount. Read-only: usage_count is never touched."""
    if not canonical_code(code):
        return PromoValidation(valid=False, message="Promo code is required")

    promo = find_active_promo(db, code)
    if not promo:
        return PromoValidation(valid=False, message="Invalid promo code")

    return check_promo(promo, amount, now)
