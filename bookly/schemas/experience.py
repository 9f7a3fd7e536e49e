import datetime as dt
from typing import Optional, List
from pydantic import BaseModel, UUID4

from bookly.schemas.common import Money


# Slot — public response
class Slot(BaseModel):
    id: UUID4
    experience_id: UUID4
    date: dt.date
    time: dt.time
    available_capacity: int
    total_capacity: int
    price_multiplier: Money
    is_available: bool
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


# Experience — list card (GET /experiences)
class Experience(BaseModel):
    id: UUID4
    title: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    location: str
    category: Optional[str] = None
    price: Money
    image_url: Optional[str] = None
    duration: Optional[str] = None
    capacity: int
    rating: Optional[Money] = None
    total_reviews: int = 0
    is_active: bool = True
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


# Experience with its bookable slots (GET /experiences/{id})
class ExperienceDetail(Experience):
    slots: List[Slot] = []

    class Config:
        from_attributes = True
