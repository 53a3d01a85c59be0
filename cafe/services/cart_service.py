import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from .. import exceptions
from ..core.config import Config
from ..domain.cart import CartLine, ShoppingCart
from ..models import Cart, CartItem, MenuItem, User
from .coupon_service import CouponService


logger = logging.getLogger(__name__)


class CartService:
    """
    Persists cart sessions and runs every mutation through ``ShoppingCart``.

    Each call loads the cart row into a fresh engine instance, applies the
    operation and writes the result back, so no cart state outlives a request.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.coupons = CouponService(db)


    async def create_cart(self, user: Optional[User] = None) -> Cart:
        """Open a new cart session"""
        cart = Cart(id=uuid.uuid4().hex, customer_id=user.id if user else None, discount_amount=0)
        self.db.add(cart)
        await self.db.commit()
        return await self.get_cart(cart.id)


    async def get_cart(self, cart_id: str) -> Cart:
        query = select(Cart).where(Cart.id == cart_id).options(selectinload(Cart.cart_items))
        cart = (await self.db.execute(query)).scalars().first()

        if not cart:
            raise exceptions.CartNotFoundException()

        return cart


    async def load(self, cart_id: str):
        """Return the cart row and a ``ShoppingCart`` rebuilt from it"""
        cart = await self.get_cart(cart_id)
        engine = ShoppingCart.restore(
            [
                CartLine(item_id=item.menu_item_id, name=item.name, unit_price=item.unit_price, quantity=item.quantity)
                for item in cart.cart_items
            ],
            coupon_code=cart.applied_coupon_code,
            discount_type=cart.discount_type,
            discount=cart.discount_amount,
        )
        return cart, engine


    def stage(self, cart: Cart, engine: ShoppingCart) -> None:
        """
        Copy engine state onto the cart rows without committing, so checkout
        can clear the cart in the same transaction as the order insert.
        """
        existing = {item.menu_item_id: item for item in cart.cart_items}
        keep = []

        for position, line in enumerate(engine.lines):
            item = existing.pop(line.item_id, None)
            if item is None:
                item = CartItem(menu_item_id=line.item_id, name=line.name, unit_price=line.unit_price)
            item.quantity = line.quantity
            item.position = position
            keep.append(item)

        # orphaned rows are removed through the delete-orphan cascade
        cart.cart_items = keep

        cart.applied_coupon_code = engine.coupon_code
        cart.discount_type = engine.discount_type
        cart.discount_amount = engine.discount
        cart.last_active = datetime.utcnow()


    def summary(self, cart: Cart, engine: ShoppingCart) -> dict:
        """Cart contents and totals in the shape of ``CartResponse``"""
        return {
            "id": cart.id,
            "items": [
                {
                    "item_id": line.item_id,
                    "name": line.name,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                    "line_total": line.line_total,
                }
                for line in engine.lines
            ],
            "item_count": engine.item_count,
            "coupon_code": engine.coupon_code,
            "discount_type": engine.discount_type,
            "subtotal": engine.subtotal,
            "discount": engine.discount,
            "total": engine.total,
            "currency": Config.CURRENCY,
            "last_active": cart.last_active,
        }


    async def get_summary(self, cart_id: str) -> dict:
        cart, engine = await self.load(cart_id)
        return self.summary(cart, engine)


    async def save(self, cart: Cart, engine: ShoppingCart) -> Cart:
        self.stage(cart, engine)
        await self.db.commit()
        return await self.get_cart(cart.id)


    async def add_item(self, cart_id: str, menu_item_id: int):
        """Add one unit of a menu item, freezing its current price on first add"""
        menu_item = await self.db.get(MenuItem, menu_item_id)
        if not menu_item or not menu_item.is_available:
            raise exceptions.MenuItemUnavailableException()

        cart, engine = await self.load(cart_id)
        engine.add_item(str(menu_item.id), menu_item.name, menu_item.price)
        return self.summary(await self.save(cart, engine), engine)


    async def remove_item(self, cart_id: str, item_id: str):
        cart, engine = await self.load(cart_id)
        engine.remove_item(item_id)
        return self.summary(await self.save(cart, engine), engine)


    async def update_quantity(self, cart_id: str, item_id: str, quantity: int):
        cart, engine = await self.load(cart_id)
        engine.update_quantity(item_id, quantity)
        return self.summary(await self.save(cart, engine), engine)


    async def clear(self, cart_id: str):
        cart, engine = await self.load(cart_id)
        engine.clear()
        return self.summary(await self.save(cart, engine), engine)


    async def apply_coupon(self, cart_id: str, code: str, user: Optional[User]):
        """
        Look up and check the coupon, then let the engine apply it.

        Raises:
            InvalidCouponException, CouponLoginRequiredException,
            CouponUsageExhaustedException: From the coupon checks.
            BadRequestException: If the cart is below the coupon's minimum order.
        """
        cart, engine = await self.load(cart_id)
        coupon = await self.coupons.resolve_for_user(code, user)

        error = engine.apply_coupon(coupon.code, coupon.discount_type, coupon.discount_value, coupon.min_order)
        if error:
            raise exceptions.BadRequestException(error)

        cart = await self.save(cart, engine)
        logger.info("Coupon %s applied to cart %s", coupon.code, cart_id)
        return self.summary(cart, engine)


    async def remove_coupon(self, cart_id: str):
        cart, engine = await self.load(cart_id)
        engine.remove_coupon()
        return self.summary(await self.save(cart, engine), engine)
