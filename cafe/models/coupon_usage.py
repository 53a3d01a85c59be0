from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from ..db.base import Base
from ..models.base import TimeStampMixin


class CouponUsage(Base, TimeStampMixin):
    __tablename__ = "coupon_usages"
    __table_args__ = (UniqueConstraint("coupon_id", "user_id", name="uq_coupon_usage_user"),)

    id = Column(Integer, primary_key=True, index=True)
    coupon_id = Column(Integer, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    used_count = Column(Integer, default=0, nullable=False)
