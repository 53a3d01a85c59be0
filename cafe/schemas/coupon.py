from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from ..enums import DiscountType


class CouponBase(BaseModel):
    """Base schema for coupons"""
    code: str = Field(..., min_length=1, max_length=64)
    description: Optional[str] = None
    discount_type: DiscountType = Field(..., description="Either 'percentage' or 'fixed'")
    discount_value: float = Field(gt=0, description="Percentage or fixed amount")
    min_order: Optional[float] = Field(None, ge=0, description="Minimum order amount required")
    is_active: bool = True
    expires_at: Optional[datetime] = None
    usage_limit_per_user: Optional[int] = Field(None, gt=0, description="Maximum uses per account")

    @field_validator("code")
    @classmethod
    def canonical_code(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def percentage_in_range(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discounts cannot exceed 100")
        return self


class CouponCreate(CouponBase):
    """Schema for creating coupons"""
    pass


class CouponUpdate(BaseModel):
    """Schema for updating coupons"""
    code: Optional[str] = Field(None, min_length=1, max_length=64)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(None, gt=0)
    min_order: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None
    usage_limit_per_user: Optional[int] = Field(None, gt=0)

    @field_validator("code")
    @classmethod
    def canonical_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class CouponResponse(CouponBase):
    """Schema for coupon responses"""
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OfferResponse(BaseModel):
    """Public view of an active coupon"""
    code: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: float
    min_order: Optional[float] = None
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True
