"""
In-memory shopping cart and coupon pricing.

A ``ShoppingCart`` holds the lines of one in-progress order plus at most one
coupon. It performs no I/O; ``CartService`` loads it from and saves it to the
database around each request.

Discounts follow a snapshot policy: the discount is computed when a coupon is
applied and is not rescaled when lines change afterwards. ``total`` is always
clamped at zero, and checkout re-validates the coupon against the current
subtotal.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Union

from ..enums import DiscountType


Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value: Number) -> Decimal:
    """Coerce to a Decimal rounded to cents. Floats go through ``str`` to avoid binary noise."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    item_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class ShoppingCart:
    def __init__(self) -> None:
        self._lines: Dict[str, CartLine] = {}
        self.coupon_code: Optional[str] = None
        self.discount_type: Optional[DiscountType] = None
        self.discount: Decimal = ZERO

    @classmethod
    def restore(
        cls,
        lines: List[CartLine],
        coupon_code: Optional[str] = None,
        discount_type: Optional[DiscountType] = None,
        discount: Number = ZERO,
    ) -> "ShoppingCart":
        """Rebuild a cart from persisted state without recomputing the discount."""
        cart = cls()
        for line in lines:
            if line.quantity > 0:
                cart._lines[line.item_id] = CartLine(line.item_id, line.name, to_money(line.unit_price), line.quantity)
        cart.coupon_code = coupon_code
        cart.discount_type = DiscountType(discount_type) if discount_type else None
        cart.discount = to_money(discount or ZERO)
        return cart

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), ZERO)

    @property
    def effective_discount(self) -> Decimal:
        """The part of the stored discount that actually comes off the subtotal."""
        return min(self.discount, self.subtotal)

    @property
    def total(self) -> Decimal:
        return max(ZERO, self.subtotal - self.discount)

    def get(self, item_id: str) -> Optional[CartLine]:
        return self._lines.get(item_id)

    def add_item(self, item_id: str, name: str, unit_price: Number) -> CartLine:
        line = self._lines.get(item_id)
        if line:
            line.quantity += 1
            return line

        line = CartLine(item_id=item_id, name=name, unit_price=to_money(unit_price), quantity=1)
        self._lines[item_id] = line
        return line

    def remove_item(self, item_id: str) -> None:
        self._lines.pop(item_id, None)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(item_id)
            return

        line = self._lines.get(item_id)
        if line:
            line.quantity = int(quantity)

    def clear(self) -> None:
        self._lines.clear()
        self.remove_coupon()

    def apply_coupon(
        self,
        code: str,
        discount_type: Union[DiscountType, str],
        discount_value: Number,
        min_order: Optional[Number] = None,
    ) -> Optional[str]:
        """
        Attach a coupon, replacing any previous one.

        Returns an error message and leaves the cart untouched when the
        subtotal is below ``min_order``; returns ``None`` on success.
        """
        subtotal = self.subtotal
        if min_order is not None and to_money(min_order) > ZERO and subtotal < to_money(min_order):
            return f"Minimum order of {to_money(min_order)} required"

        discount_type = DiscountType(discount_type)
        value = Decimal(str(discount_value)) if isinstance(discount_value, float) else Decimal(discount_value)

        if discount_type == DiscountType.PERCENTAGE:
            discount = subtotal * value / Decimal(100)
        else:
            discount = value

        self.coupon_code = code.strip().upper()
        self.discount_type = discount_type
        self.discount = to_money(discount)
        return None

    def remove_coupon(self) -> None:
        self.coupon_code = None
        self.discount_type = None
        self.discount = ZERO
