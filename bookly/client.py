"""
HTTP client for the Bookly API, used by front ends and scripts.

Configuration is passed in explicitly::

    client = BooklyClient(ClientConfig(base_url="https://api.example.com/api/v1", api_key="..."))
    experiences = client.get_experiences()
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, message: str, status_code: int, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    api_key: Optional[str] = None
    timeout: float = 10.0


def validate_booking_form(form: Dict[str, Any]) -> Dict[str, str]:
    """
    Checkout form checks run before calling the API. The server repeats its
    own checks and does not rely on these.
    """
    errors = {}
    if not str(form.get("customer_name") or "").strip():
        errors["customer_name"] = "Name is required"

    email = str(form.get("customer_email") or "").strip()
    if not email:
        errors["customer_email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["customer_email"] = "Invalid email format"

    if not str(form.get("customer_phone") or "").strip():
        errors["customer_phone"] = "Phone is required"

    try:
        num_people = int(form.get("num_people") or 0)
    except (TypeError, ValueError):
        num_people = 0
    if num_people < 1:
        errors["num_people"] = "At least one person is required"
    return errors


class BooklyClient:
    def __init__(self, config: ClientConfig, session=None):
        self.config = config
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self._url(path)
        if method == "GET":
            response = self.session.get(url, headers=self._headers(), timeout=self.config.timeout, **kwargs)
        else:
            response = self.session.post(url, headers=self._headers(), timeout=self.config.timeout, **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = body.get("error") if isinstance(body, dict) else None
            errors = body.get("errors") if isinstance(body, dict) else None
            logger.warning("%s %s failed with %s: %s", method, url, response.status_code, message)
            raise ApiError(message or f"Request failed ({response.status_code})", response.status_code, errors)
        return body

    def get_experiences(self) -> List[Dict[str, Any]]:
        return self._request("GET", "experiences")

    def get_experience(self, experience_id: str) -> Dict[str, Any]:
        return self._request("GET", f"experiences/{experience_id}")

    def create_booking(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "bookings", json=booking)

    def quote_booking(self, experience_id: str, slot_id: str, num_people: int,
                      promo_code: Optional[str] = None) -> Dict[str, Any]:
        payload = {"experience_id": experience_id, "slot_id": slot_id, "num_people": num_people}
        if promo_code:
            payload["promo_code"] = promo_code
        return self._request("POST", "bookings/quote", json=payload)

    def validate_promo_code(self, code: str, amount) -> Dict[str, Any]:
        return self._request("POST", "promo-codes/validate", json={"code": code, "amount": float(amount)})

    def get_booking(self, booking_reference: str) -> Dict[str, Any]:
        return self._request("GET", f"bookings/{booking_reference}")

    def cancel_booking(self, booking_reference: str, customer_email: str) -> Dict[str, Any]:
        return self._request("POST", f"bookings/{booking_reference}/cancel",
                             json={"customer_email": customer_email})
