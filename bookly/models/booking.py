import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from bookly.db.session import Base

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    experience_id = Column(Uuid(as_uuid=True), ForeignKey("experiences.id"), nullable=False, index=True)
    slot_id = Column(Uuid(as_uuid=True), ForeignKey("slots.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_phone = Column(String(30), nullable=False)
    num_people = Column(Integer, nullable=False, default=1)
    total_price = Column(DECIMAL(10, 2), nullable=False) # after discount, taxes excluded
    promo_code = Column(String(50), nullable=True)
    discount_amount = Column(DECIMAL(10, 2), nullable=False, default=0)
    status = Column(String(20), default="confirmed", index=True) # pending, confirmed, cancelled
    booking_reference = Column(String(20), unique=True, nullable=False, index=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    experience = relationship("Experience", back_populates="bookings")
    slot = relationship("Slot", back_populates="bookings")
