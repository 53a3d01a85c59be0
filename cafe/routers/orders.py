from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from ..core.dependencies import RoleChecker, get_current_user, get_db, get_optional_user, get_order_events
from ..domain.order_lifecycle import BACK_OFFICE
from ..enums import BoardView, UserRole
from ..exceptions import PermissionRequiredException
from ..models import User
from ..schemas.board import BoardSnapshot
from ..schemas.order import (
    CheckoutRequest,
    OrderDetail,
    OrderStatusHistoryResponse,
    OrderStatusUpdate,
    OrderTrackingResponse,
    StatusChangeResponse,
)
from ..services.checkout_service import CheckoutService
from ..services.order_board import can_view_board, reconcile_board
from ..services.order_events import OrderEventBus
from ..services.order_service import OrderService


router = APIRouter()
back_office_only = Depends(RoleChecker(list(BACK_OFFICE)))
managers_only = Depends(RoleChecker([UserRole.STAFF, UserRole.ADMIN]))


async def get_order_service(
    db: AsyncSession = Depends(get_db),
    events: OrderEventBus = Depends(get_order_events),
) -> OrderService:
    return OrderService(db, events)


async def get_checkout_service(
    db: AsyncSession = Depends(get_db),
    events: OrderEventBus = Depends(get_order_events),
) -> CheckoutService:
    return CheckoutService(db, events)


@router.post("/", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
async def place_order(
    data: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    **Place Order**

    Turns the cart into an order. Signed-in customers and guests can both
    check out.

    **Request Body:**
    - **cart_id**: The cart session to check out
    - **order_type**: `dine_in`, `pickup` or `delivery`
    - **table_number**: Required for dine-in
    - **customer_name** / **customer_phone**: Required for pickup and delivery
      (signed-in users fall back to their profile)
    - **delivery_address**: Required for delivery
    - **notes**: Optional kitchen notes

    **Process:**
    1. Checks the cart is not empty and the details fit the order type
    2. Re-checks the coupon, if any, against the current cart
    3. Saves the order and its items, records coupon usage and empties the
       cart in one transaction
    4. Notifies the order boards

    If saving fails nothing is written and the cart is left as it was.
    """
    order = await service.place_order(data, current_user)
    return await OrderService(service.db).get_order(order.id)


@router.get("/mine", response_model=List[OrderDetail])
async def get_my_orders(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user),
):
    """Order history of the signed-in customer, newest first"""
    return await service.list_orders(customer_id=current_user.id, skip=skip, limit=limit)


@router.get("/track/{order_number}", response_model=OrderTrackingResponse)
async def track_order(
    order_number: str = Path(..., description="Order number printed on the receipt"),
    service: OrderService = Depends(get_order_service),
):
    """Public status lookup by order number"""
    return await service.get_by_number(order_number)


@router.get("/board/{view}", response_model=BoardSnapshot)
async def get_order_board(
    view: BoardView = Path(..., description="kitchen, staff, admin or customer"),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user),
):
    """
    **Order Board**

    Orders grouped by status for one board. The kitchen board holds pending
    and cooking orders; the other boards show every status. The customer
    board only lists the caller's own orders.

    The same snapshot is pushed over `/api/v1/realtime/orders` whenever
    orders change.
    """
    if not can_view_board(view, current_user.role):
        raise PermissionRequiredException()

    orders = await service.list_for_board(view, current_user)
    return reconcile_board(view, orders)


@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: int = Path(..., description="ID of the order"),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user),
):
    """Get an order. Customers can only see their own orders."""
    customer_id = None if current_user.role in BACK_OFFICE else current_user.id
    return await service.get_order(order_id, customer_id)


@router.post("/{order_id}/status", dependencies=[back_office_only], response_model=StatusChangeResponse)
async def change_order_status(
    data: OrderStatusUpdate,
    order_id: int = Path(..., description="ID of the order"),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user),
):
    """
    **Change Order Status**

    Send either an `action` (`advance` or `cancel`) or a target `status`.
    `advance` also carries `from_status`, the status shown when the button
    was pressed; the next step is taken from it, so a resend is harmless.

    **Rules:**
    - pending → cooking and cooking → ready: kitchen, staff, admin
    - ready → served: staff, admin
    - pending, cooking or ready → cancelled: staff, admin
    - served and cancelled orders can't change any more

    Asking for the status the order already has succeeds with
    `changed: false`. A move the table does not allow returns 409, a move
    the role may not take returns 403.
    """
    order, changed, previous = await service.change_status(order_id, data, current_user)
    return {"order": order, "changed": changed, "previous_status": previous}


@router.get("/{order_id}/history", dependencies=[managers_only], response_model=List[OrderStatusHistoryResponse])
async def get_order_history(
    order_id: int = Path(..., description="ID of the order"),
    service: OrderService = Depends(get_order_service),
):
    """Status changes of an order, oldest first"""
    return await service.get_history(order_id)
