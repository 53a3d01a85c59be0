from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

import bleach

from ..enums import OrderAction, OrderStatus, OrderType, PaymentMethod, PaymentStatus


def strip_markup(v: Optional[str]) -> Optional[str]:
    """Free text is shown on the kitchen board; drop any HTML."""
    if v is None:
        return v
    cleaned = bleach.clean(v, tags=[], attributes={}, strip=True).strip()
    return cleaned or None


class CheckoutRequest(BaseModel):
    """
    Schema for placing an order from a cart.

    Which contact fields are required depends on ``order_type`` and on whether
    the caller is signed in; those rules are checked by the checkout service.
    """
    cart_id: str
    order_type: OrderType
    table_number: Optional[int] = Field(None, gt=0)
    customer_name: Optional[str] = Field(None, max_length=120)
    customer_phone: Optional[str] = Field(None, max_length=32)
    customer_email: Optional[EmailStr] = None
    delivery_address: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("customer_name", "customer_phone", "delivery_address", "notes")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_markup(v)


class OrderItemResponse(BaseModel):
    """Schema for order item responses"""
    id: int
    menu_item_id: Optional[str] = None
    item_name: str
    quantity: int
    price: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    order_number: str
    order_type: OrderType
    status: OrderStatus
    customer_id: Optional[str] = None
    is_guest: bool
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    subtotal: float
    discount: float
    coupon_code: Optional[str] = None
    grand_total: float
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderDetail(OrderResponse):
    """Schema for detailed order responses"""
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    delivery_address: Optional[str] = None
    table_number: Optional[int] = None
    notes: Optional[str] = None
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True


class OrderTrackingResponse(BaseModel):
    """Public status lookup by order number"""
    order_number: str
    order_type: OrderType
    status: OrderStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    """
    Schema for moving an order through its lifecycle. Send either an
    ``action`` (advance/cancel) or an explicit target ``status``.

    ``advance`` also needs ``from_status``, the status the board showed when
    the button was pressed. The next step is worked out from it, so a repeated
    click asks for the same target again instead of skipping ahead.
    """
    action: Optional[OrderAction] = None
    from_status: Optional[OrderStatus] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return strip_markup(v)

    @model_validator(mode="after")
    def one_of_action_or_status(self):
        if (self.action is None) == (self.status is None):
            raise ValueError("Provide exactly one of 'action' or 'status'")
        if self.action == OrderAction.ADVANCE and self.from_status is None:
            raise ValueError("'from_status' is required with action 'advance'")
        return self


class PaymentStatusUpdate(BaseModel):
    """Schema for recording payment against an order"""
    payment_status: PaymentStatus


class StatusChangeResponse(BaseModel):
    order: OrderDetail
    changed: bool
    previous_status: OrderStatus


class OrderStatusHistoryResponse(BaseModel):
    id: int
    previous_status: str
    new_status: str
    changed_by_id: Optional[str] = None
    changed_at: datetime
    notes: Optional[str] = None

    class Config:
        from_attributes = True
