from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookly.db.session import get_db
from bookly.schemas.common import ErrorResponse
from bookly.schemas.experience import (
    Experience as ExperienceSchema,
    ExperienceDetail,
    Slot as SlotSchema,
)
from bookly.utils.catalog import get_experience, list_experiences

router = APIRouter(prefix="/experiences", tags=["Experiences"])


def _experience_detail(db: Session, experience_id: str) -> ExperienceDetail:
    experience, slots = get_experience(db, experience_id)
    return ExperienceDetail(
        **ExperienceSchema.model_validate(experience).model_dump(),
        slots=[SlotSchema.model_validate(s) for s in slots],
    )


@router.get(
    "",
    response_model=Union[List[ExperienceSchema], ExperienceDetail],
    responses={404: {"model": ErrorResponse}},
)
def browse_experiences(
    id: Optional[str] = Query(None, description="Return a single experience with its slots"),
    db: Session = Depends(get_db),
):
    """
    List active experiences, highest rated first.
    With `?id=` behaves like `GET /experiences/{id}`.
    """
    if id:
        return _experience_detail(db, id)
    return [ExperienceSchema.model_validate(e) for e in list_experiences(db)]


@router.get(
    "/{experience_id}",
    response_model=ExperienceDetail,
    responses={404: {"model": ErrorResponse}},
)
def read_experience(experience_id: str, db: Session = Depends(get_db)):
    """One active experience with its upcoming, still-available slots in date/time order."""
    return _experience_detail(db, experience_id)
