import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, DECIMAL, Integer, Uuid, Enum as SAEnum
from bookly.db.session import Base

class DiscountType(str, enum.Enum):
    percentage = "percentage"
    flat = "flat"

class PromoCode(Base):
    __tablename__ = "promo_codes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(50), unique=True, nullable=False, index=True) # stored uppercase
    discount_type = Column(SAEnum(DiscountType, native_enum=False), nullable=False)
    discount_value = Column(DECIMAL(10, 2), nullable=False)
    max_discount = Column(DECIMAL(10, 2), nullable=True) # cap for percentage promos
    min_amount = Column(DECIMAL(10, 2), nullable=False, default=0)
    valid_from = Column(DateTime(timezone=True), nullable=True)
    valid_until = Column(DateTime(timezone=True), nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    usage_limit = Column(Integer, nullable=True) # NULL = unlimited
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
