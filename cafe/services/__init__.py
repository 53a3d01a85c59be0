from .auth_service import AuthService
from .cart_service import CartService
from .checkout_service import CheckoutService
from .coupon_service import CouponService
from .order_service import OrderService


__all__ = [
    "AuthService",
    "CartService",
    "CheckoutService",
    "CouponService",
    "OrderService",
]
