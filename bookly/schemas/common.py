from decimal import Decimal
from typing import Annotated, Dict, Optional

from pydantic import BaseModel, PlainSerializer

# Decimal internally, JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# Error responses
class ErrorResponse(BaseModel):
    error: str


class ValidationErrorResponse(ErrorResponse):
    errors: Dict[str, str] = {}


class HealthResponse(BaseModel):
    status: str
    database: Optional[str] = None
