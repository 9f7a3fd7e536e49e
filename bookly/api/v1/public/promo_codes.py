from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookly.db.session import get_db
from bookly.schemas.promo_code import PromoValidateRequest, PromoValidateResponse
from bookly.utils.promo import validate_promo

router = APIRouter(prefix="/promo-codes", tags=["Promo Codes"])
validate_promo_router = APIRouter(tags=["Promo Codes"])


@router.post("/validate", response_model=PromoValidateResponse)
def validate_promo_code(data: PromoValidateRequest, db: Session = Depends(get_db)):
    """
    Check a promo code against an order amount.
    Always answers 200; an unusable code comes back with `valid: false` and the reason.
    Validation never counts as a use of the code.
    """
    result = validate_promo(db, data.code, data.amount)
    return PromoValidateResponse.model_validate(result, from_attributes=True)


# Same endpoint under the path the checkout page was first built against
validate_promo_router.add_api_route(
    "/validate-promo",
    validate_promo_code,
    methods=["POST"],
    response_model=PromoValidateResponse,
)
