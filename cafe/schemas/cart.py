from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from ..enums import DiscountType


class CartItemAdd(BaseModel):
    """Schema for adding a menu item to the cart"""
    menu_item_id: int


class CartItemQuantityUpdate(BaseModel):
    """Schema for setting a line quantity. Zero or less removes the line."""
    quantity: int


class CouponApply(BaseModel):
    """Schema for applying a coupon to the cart"""
    code: str = Field(..., min_length=1, max_length=64)


class CartLineResponse(BaseModel):
    """Schema for cart line responses"""
    item_id: str
    name: str
    unit_price: float
    quantity: int
    line_total: float

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    """Schema for cart responses"""
    id: str
    items: List[CartLineResponse] = []
    item_count: int = 0
    coupon_code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    subtotal: float
    discount: float
    total: float
    currency: str
    last_active: Optional[datetime] = None
