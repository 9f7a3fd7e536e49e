import uuid
from sqlalchemy import (
    Column, Boolean, Date, Time, DateTime, func, Integer, DECIMAL, ForeignKey, Uuid, CheckConstraint,
)
from sqlalchemy.orm import relationship
from bookly.db.session import Base

class Slot(Base):
    __tablename__ = "slots"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    experience_id = Column(Uuid(as_uuid=True), ForeignKey("experiences.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    available_capacity = Column(Integer, nullable=False)
    total_capacity = Column(Integer, nullable=False)
    price_multiplier = Column(DECIMAL(4, 2), nullable=False, default=1) # e.g. 1.50 for sunset slots
    is_available = Column(Boolean, default=True, index=True) # available_capacity > 0
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "available_capacity >= 0 AND available_capacity <= total_capacity",
            name="ck_slot_capacity_bounds",
        ),
    )

    # Relationships
    experience = relationship("Experience", back_populates="slots")
    bookings = relationship("Booking", back_populates="slot")
