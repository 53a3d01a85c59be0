from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, Numeric, String

from ..db.base import Base
from ..enums import DiscountType
from ..models.base import TimeStampMixin


class Coupon(Base, TimeStampMixin):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, nullable=False, unique=True, index=True)  # stored upper-cased
    description = Column(String, nullable=True)
    discount_type = Column(Enum(DiscountType), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False)  # Either percentage or fixed amount
    min_order = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    usage_limit_per_user = Column(Integer, nullable=True)
