from .cart import CartItemAdd, CartItemQuantityUpdate, CartResponse, CouponApply
from .order import CheckoutRequest, OrderDetail, OrderResponse, OrderStatusUpdate
from .user_schema import ProfileUpdate, RoleUpdate, UserResponse


__all__ = [
    # cart schemas
    "CartItemAdd",
    "CartItemQuantityUpdate",
    "CartResponse",
    "CouponApply",

    # order schemas
    "CheckoutRequest",
    "OrderDetail",
    "OrderResponse",
    "OrderStatusUpdate",

    # user schemas
    "ProfileUpdate",
    "RoleUpdate",
    "UserResponse",
]
