from bookly.db.session import Base
from bookly.models.experience import Experience
from bookly.models.slot import Slot
from bookly.models.promo_code import PromoCode
from bookly.models.booking import Booking
