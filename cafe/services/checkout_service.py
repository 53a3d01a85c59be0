import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from .. import exceptions
from ..core.config import Config
from ..domain.cart import ShoppingCart, ZERO
from ..domain.order_lifecycle import INITIAL_STATUS
from ..enums import OrderType, PaymentMethod, PaymentStatus
from ..models import CafeTable, Order, OrderItem, User
from ..schemas.order import CheckoutRequest
from .cart_service import CartService
from .coupon_service import CouponService
from .order_events import ORDER_CREATED, OrderEventBus, event_for


logger = logging.getLogger(__name__)


def new_order_number() -> str:
    return f"ORD-{uuid.uuid4().hex[:8].upper()}"


class CheckoutService:
    """
    Turns a cart session into an order.

    All checks run before anything is written. The order, its line items, the
    coupon usage increment and the emptied cart are then committed together,
    so a failure leaves neither a half-written order nor an emptied cart.
    """

    def __init__(self, db: AsyncSession, events: Optional[OrderEventBus] = None):
        self.db = db
        self.events = events
        self.carts = CartService(db)
        self.coupons = CouponService(db)


    def validate_details(self, engine: ShoppingCart, data: CheckoutRequest, user: Optional[User]) -> None:
        """
        Check the fields each order type needs.

        Dine-in needs a table number only. Pickup and delivery need a name and
        phone from a guest (account holders fall back to their profile), and
        delivery also needs an address.
        """
        if engine.is_empty:
            raise exceptions.EmptyCartException()

        if data.order_type == OrderType.DINE_IN:
            if data.table_number is None:
                raise exceptions.CheckoutValidationException("Please enter a table number for dine-in orders.")

        else:
            if user is None and not Config.ALLOW_GUEST_CHECKOUT:
                raise exceptions.CheckoutValidationException(f"Please log in to place {data.order_type.value} orders.")

            name = data.customer_name or (user.full_name if user else None)
            phone = data.customer_phone or (user.phone if user else None)
            if not name or not phone:
                raise exceptions.CheckoutValidationException(f"Name and phone required for {data.order_type.value} orders.")

            if data.order_type == OrderType.DELIVERY and not data.delivery_address:
                raise exceptions.CheckoutValidationException("A delivery address is required for delivery orders.")


    async def resolve_table(self, table_number: int) -> CafeTable:
        stmt = select(CafeTable).filter_by(table_number=table_number)
        table = (await self.db.execute(stmt)).scalars().first()

        if not table:
            raise exceptions.TableNotFoundException()

        return table


    async def revalidate_coupon(self, engine: ShoppingCart, user: Optional[User]):
        """
        The discount was fixed when the coupon was applied. Before it is
        charged, make sure the coupon is still live and the cart still meets
        its minimum order.
        """
        if not engine.coupon_code:
            return None

        coupon = await self.coupons.resolve_for_user(engine.coupon_code, user)
        if coupon.min_order is not None and coupon.min_order > 0 and engine.subtotal < coupon.min_order:
            raise exceptions.BadRequestException(
                f"Minimum order of {Decimal(coupon.min_order):.2f} required for coupon {coupon.code}"
            )
        return coupon


    async def place_order(self, data: CheckoutRequest, user: Optional[User]) -> Order:
        cart, engine = await self.carts.load(data.cart_id)

        self.validate_details(engine, data, user)

        table = None
        if data.order_type == OrderType.DINE_IN:
            table = await self.resolve_table(data.table_number)

        coupon = await self.revalidate_coupon(engine, user)

        subtotal = engine.subtotal
        discount = engine.effective_discount if coupon else ZERO
        grand_total = subtotal - discount
        if grand_total <= ZERO:
            raise exceptions.CheckoutValidationException("Order total must be greater than zero.")

        is_contact_order = data.order_type != OrderType.DINE_IN
        order = Order(
            order_number=new_order_number(),
            order_type=data.order_type,
            status=INITIAL_STATUS,
            customer_id=user.id if user else None,
            is_guest=user is None,
            customer_name=data.customer_name or (user.full_name if user and is_contact_order else None),
            customer_phone=data.customer_phone or (user.phone if user and is_contact_order else None),
            customer_email=data.customer_email or (user.email if user else None),
            delivery_address=data.delivery_address if data.order_type == OrderType.DELIVERY else None,
            table_id=table.id if table else None,
            subtotal=subtotal,
            discount=discount,
            coupon_code=coupon.code if coupon else None,
            grand_total=grand_total,
            notes=data.notes,
            payment_method=PaymentMethod.CASH,
            payment_status=PaymentStatus.UNPAID,
        )

        try:
            self.db.add(order)
            await self.db.flush()  # Get the order ID without committing

            for line in engine.lines:
                self.db.add(OrderItem(
                    order_id=order.id,
                    menu_item_id=line.item_id,
                    item_name=line.name,
                    quantity=line.quantity,
                    price=line.unit_price,
                ))

            if coupon and user:
                await self.coupons.record_usage(coupon.id, user.id)

            engine.clear()
            self.carts.stage(cart, engine)

            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to place order from cart %s", data.cart_id)
            raise exceptions.OrderPersistenceException() from e

        logger.info(
            "Order %s placed (%s, total %s, guest=%s)",
            order.order_number, order.order_type.value, grand_total, order.is_guest,
        )

        if self.events is not None:
            await self.events.publish(event_for(ORDER_CREATED, order))

        return order
