from .cafe_table import CafeTable
from .cart import Cart
from .cart_item import CartItem
from .contact_message import ContactMessage
from .coupon import Coupon
from .coupon_usage import CouponUsage
from .menu_category import MenuCategory
from .menu_item import MenuItem
from .order import Order
from .order_item import OrderItem
from .order_status_history import OrderStatusHistory
from .user import User


__all__ = [
    "CafeTable",
    "Cart",
    "CartItem",
    "ContactMessage",
    "Coupon",
    "CouponUsage",
    "MenuCategory",
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatusHistory",
    "User",
]
