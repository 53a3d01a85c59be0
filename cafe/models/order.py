from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..db.base import Base
from ..enums import OrderStatus, OrderType, PaymentMethod, PaymentStatus


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, nullable=False, unique=True, index=True)
    order_type = Column(Enum(OrderType), nullable=False)
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)

    customer_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    is_guest = Column(Boolean, default=False, nullable=False)
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    delivery_address = Column(Text, nullable=True)
    table_id = Column(Integer, ForeignKey("cafe_tables.id", ondelete="SET NULL"), nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), default=0, nullable=False)
    coupon_code = Column(String, nullable=True)
    grand_total = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)

    payment_method = Column(Enum(PaymentMethod), default=PaymentMethod.CASH, nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customer = relationship("User", back_populates="orders")
    table = relationship("CafeTable")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    status_history = relationship("OrderStatusHistory", back_populates="order", cascade="all, delete-orphan")


    @property
    def table_number(self):
        # callers load ``table`` eagerly; see OrderService.detail_options
        return self.table.table_number if self.table is not None else None

    def __repr__(self):
        return f'<Order(id={self.id}, order_number={self.order_number}, status={self.status})>'
