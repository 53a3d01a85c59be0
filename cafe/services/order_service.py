import logging
from typing import Iterable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from .. import exceptions
from ..domain import order_lifecycle
from ..domain.order_lifecycle import ACTIVE_STATUSES
from ..enums import BoardView, OrderStatus, PaymentStatus
from ..models import Order, OrderStatusHistory, User
from ..schemas.order import OrderStatusUpdate
from .order_board import BOARD_STATUSES
from .order_events import ORDER_PAYMENT_UPDATED, ORDER_STATUS_CHANGED, OrderEventBus, event_for


logger = logging.getLogger(__name__)


def detail_options():
    return (selectinload(Order.items), selectinload(Order.table))


class OrderService:
    def __init__(self, db: AsyncSession, events: Optional[OrderEventBus] = None):
        self.db = db
        self.events = events


    async def get_order(self, order_id: int, customer_id: Optional[str] = None) -> Order:
        """
        Get order by ID with items and table loaded.
        If customer_id is provided, ensure the order belongs to that customer.
        """
        query = select(Order).where(Order.id == order_id).options(*detail_options())

        if customer_id is not None:
            query = query.where(Order.customer_id == customer_id)

        # re-read rows another writer may have changed since this session loaded them
        query = query.execution_options(populate_existing=True)

        order = (await self.db.execute(query)).scalars().first()

        if not order:
            raise exceptions.OrderNotFoundException()

        return order


    async def get_by_number(self, order_number: str) -> Order:
        query = select(Order).where(Order.order_number == order_number.strip().upper())
        order = (await self.db.execute(query)).scalars().first()

        if not order:
            raise exceptions.OrderNotFoundException()

        return order


    async def list_orders(
        self,
        statuses: Optional[Iterable[OrderStatus]] = None,
        customer_id: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
        newest_first: bool = True,
    ) -> List[Order]:
        query = select(Order).options(*detail_options())

        if statuses is not None:
            query = query.where(Order.status.in_(list(statuses)))

        if customer_id is not None:
            query = query.where(Order.customer_id == customer_id)

        query = query.order_by(Order.created_at.desc() if newest_first else Order.created_at.asc())
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalars().all()


    async def list_for_board(self, view: BoardView, user: Optional[User] = None) -> List[Order]:
        """Fetch the orders a board shows. Customers only ever see their own."""
        customer_id = None
        if view == BoardView.CUSTOMER:
            if user is None:
                return []
            customer_id = user.id

        return await self.list_orders(statuses=BOARD_STATUSES[view], customer_id=customer_id)


    async def list_active(self) -> List[Order]:
        return await self.list_orders(statuses=ACTIVE_STATUSES, newest_first=False)


    async def change_status(self, order_id: int, request: OrderStatusUpdate, actor: User):
        """
        Move an order along its lifecycle.

        An ``advance`` resolves its target from ``from_status``, the status the
        caller saw, so sending it twice lands on the same step both times.

        The write is a compare-and-set on the status read here. If another
        writer changed it in between, the call succeeds only when the order
        already holds the requested status.

        Returns:
            (order, changed, previous_status)
        """
        order = await self.get_order(order_id)
        previous = OrderStatus(order.status)

        if request.action is not None:
            target = order_lifecycle.target_for_action(request.from_status or previous, request.action)
        else:
            target = request.status

        resulting = order_lifecycle.transition(previous, target, actor.role)
        if resulting == previous:
            logger.info("Order %s already %s; nothing to do", order.order_number, previous.value)
            return order, False, previous

        try:
            result = await self.db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == previous)
                .values(status=resulting)
            )

            if result.rowcount == 0:
                await self.db.rollback()
                current = await self.get_order(order_id)
                if current.status == resulting:
                    return current, False, previous
                raise exceptions.ConflictException(
                    f"Order {current.order_number} changed to {OrderStatus(current.status).value} while you were updating it"
                )

            self.db.add(OrderStatusHistory(
                order_id=order_id,
                previous_status=previous.value,
                new_status=resulting.value,
                changed_by_id=actor.id,
                notes=request.notes,
            ))
            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to update status of order %s", order_id)
            raise exceptions.OrderPersistenceException() from e

        order = await self.get_order(order_id)
        logger.info(
            "Order %s: %s -> %s by %s (%s)",
            order.order_number, previous.value, resulting.value, actor.id, OrderStatus(order.status).value,
        )

        if self.events is not None:
            await self.events.publish(event_for(ORDER_STATUS_CHANGED, order))

        return order, True, previous


    async def update_payment_status(self, order_id: int, payment_status: PaymentStatus) -> Order:
        order = await self.get_order(order_id)
        if order.payment_status == payment_status:
            return order

        order.payment_status = payment_status
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to update payment status of order %s", order_id)
            raise exceptions.OrderPersistenceException() from e

        order = await self.get_order(order_id)
        if self.events is not None:
            await self.events.publish(event_for(ORDER_PAYMENT_UPDATED, order))

        return order


    async def get_history(self, order_id: int) -> List[OrderStatusHistory]:
        await self.get_order(order_id)
        query = (
            select(OrderStatusHistory)
            .where(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.changed_at.asc(), OrderStatusHistory.id.asc())
        )
        return (await self.db.execute(query)).scalars().all()
