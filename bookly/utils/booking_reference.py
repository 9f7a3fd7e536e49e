import random
import re
import string
from typing import Optional

from bookly.core.config import settings

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 8

_rng = random.SystemRandom()


def generate_booking_reference(prefix: Optional[str] = None) -> str:
    """Return a shareable reference such as 'BK7Q2M9XKD'. Uniqueness is enforced by the bookings table."""
    prefix = settings.BOOKING_REFERENCE_PREFIX if prefix is None else prefix
    return prefix + "".join(_rng.choices(REFERENCE_ALPHABET, k=REFERENCE_LENGTH))


def is_booking_reference(value: str, prefix: Optional[str] = None) -> bool:
    prefix = settings.BOOKING_REFERENCE_PREFIX if prefix is None else prefix
    return re.fullmatch(rf"{re.escape(prefix)}[A-Z0-9]{{{REFERENCE_LENGTH}}}", value or "") is not None
