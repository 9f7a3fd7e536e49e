from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from bookly.core.config import settings

CENTS = Decimal("0.01")
WHOLE = Decimal("1")


@dataclass(frozen=True)
class PriceQuote:
    base: Decimal
    discount: Decimal
    subtotal: Decimal
    taxes: Decimal
    total: Decimal


def to_cents(amount) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def base_price(price, num_people: int, multiplier) -> Decimal:
    """Pre-discount price for a party: per-person price x party size x slot multiplier."""
    return to_cents(Decimal(price) * num_people * Decimal(multiplier))


def quote_price(
    price,
    num_people: int,
    multiplier,
    discount=Decimal("0"),
    tax_rate: Optional[Decimal] = None,
) -> PriceQuote:
    """
    Price a booking.

    Taxes are charged on the pre-discount base and rounded half-up to whole
    currency units. The discount must already be clamped by the caller; a
    discount larger than the base yields a negative subtotal.
    """
    rate = settings.TAX_RATE if tax_rate is None else Decimal(tax_rate)
    base = base_price(price, num_people, multiplier)
    discount = to_cents(discount)
    subtotal = base - discount
    taxes = (base * rate).quantize(WHOLE, rounding=ROUND_HALF_UP)
    return PriceQuote(
        base=base,
        discount=discount,
        subtotal=subtotal,
        taxes=taxes,
        total=subtotal + taxes,
    )


def clamp_discount(discount, amount) -> Decimal:
    """Limit a discount to the amount it is taken from, so the subtotal never goes negative."""
    return max(Decimal("0"), min(Decimal(discount), Decimal(amount)))
