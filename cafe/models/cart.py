from sqlalchemy import Column, DateTime, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship
from datetime import datetime

from ..db.base import Base
from ..enums import DiscountType
from ..models.base import TimeStampMixin


class Cart(Base, TimeStampMixin):
    """ Server-side cart session. The id doubles as the token the client keeps. """
    __tablename__ = "carts"

    id = Column(String, primary_key=True)
    customer_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    applied_coupon_code = Column(String, nullable=True)
    discount_type = Column(Enum(DiscountType), nullable=True)
    discount_amount = Column(Numeric(10, 2), default=0, nullable=False)
    last_active = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    cart_items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position",
    )
