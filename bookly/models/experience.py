import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, DECIMAL, Integer, Uuid
from sqlalchemy.orm import relationship
from bookly.db.session import Base

class Experience(Base):
    __tablename__ = "experiences"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    location = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    price = Column(DECIMAL(10, 2), nullable=False) # per person, before slot multiplier
    image_url = Column(Text, nullable=True)
    duration = Column(String(50), nullable=True) # free text, e.g. "3 hours"
    capacity = Column(Integer, nullable=False, default=10) # max party size
    rating = Column(DECIMAL(2, 1), default=0.0, index=True)
    total_reviews = Column(Integer, default=0)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    slots = relationship("Slot", back_populates="experience", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="experience")
