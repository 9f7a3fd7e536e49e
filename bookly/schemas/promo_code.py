from typing import Optional
from pydantic import BaseModel
from decimal import Decimal

from bookly.schemas.common import Money


# Promo validation request (POST /promo-codes/validate)
class PromoValidateRequest(BaseModel):
    code: Optional[str] = None
    amount: Optional[Decimal] = None


# Always returned with HTTP 200, valid or not
class PromoValidateResponse(BaseModel):
    valid: bool
    message: str
    discount_type: Optional[str] = None
    discount_value: Optional[Money] = None
    discount_amount: Optional[Money] = None

    class Config:
        from_attributes = True
