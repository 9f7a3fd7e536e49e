from fastapi import APIRouter

# Public — discovery
from bookly.api.v1.public.experiences import router as experiences_router

# Public — checkout
from bookly.api.v1.public.promo_codes import (
    router as promo_codes_router,
    validate_promo_router,
)
from bookly.api.v1.public.bookings import router as bookings_router

# Ops
from bookly.api.v1.public.health import router as health_router

api_router = APIRouter()

# --- Public: discovery ---
api_router.include_router(experiences_router)

# --- Public: checkout ---
api_router.include_router(promo_codes_router)
api_router.include_router(validate_promo_router)
api_router.include_router(bookings_router)

# --- Ops ---
api_router.include_router(health_router)
