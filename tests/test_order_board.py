import asyncio
from datetime import datetime, timedelta

from cafe.enums import BoardView, OrderStatus, UserRole
from cafe.schemas.order import OrderDetail
from cafe.services.order_board import BoardFeed, can_view_board, reconcile_board
from cafe.services.order_events import ORDER_CREATED, OrderEvent, OrderEventBus


BASE_TIME = datetime(2026, 1, 5, 8, 0, 0)


def _order(order_id: int, status: OrderStatus, minutes: int = 0, customer_id: str = None) -> OrderDetail:
    created = BASE_TIME + timedelta(minutes=minutes)
    return OrderDetail(
        id=order_id,
        order_number=f"ORD-{order_id:08d}",
        order_type="dine_in",
        status=status,
        customer_id=customer_id,
        is_guest=customer_id is None,
        payment_method="cash",
        payment_status="unpaid",
        subtotal=10,
        discount=0,
        grand_total=10,
        created_at=created,
        updated_at=created,
        table_number=3,
    )


def _event(order_id: int = 1, customer_id: str = None) -> OrderEvent:
    return OrderEvent(ORDER_CREATED, order_id, f"ORD-{order_id:08d}", "pending", customer_id)


def test_kitchen_board_only_has_pending_and_cooking():
    orders = [
        _order(1, OrderStatus.PENDING),
        _order(2, OrderStatus.READY),
        _order(3, OrderStatus.COOKING),
        _order(4, OrderStatus.SERVED),
    ]

    snapshot = reconcile_board(BoardView.KITCHEN, orders)

    assert list(snapshot.columns) == ["pending", "cooking"]
    assert [o.id for o in snapshot.columns["pending"]] == [1]
    assert [o.id for o in snapshot.columns["cooking"]] == [3]
    assert snapshot.active_count == 2
    assert snapshot.completed_count == 0


def test_active_columns_oldest_first_terminal_newest_first():
    orders = [
        _order(1, OrderStatus.PENDING, minutes=10),
        _order(2, OrderStatus.PENDING, minutes=0),
        _order(3, OrderStatus.SERVED, minutes=0),
        _order(4, OrderStatus.SERVED, minutes=30),
    ]

    snapshot = reconcile_board(BoardView.STAFF, orders)

    assert [o.id for o in snapshot.columns["pending"]] == [2, 1]
    assert [o.id for o in snapshot.columns["served"]] == [4, 3]
    assert snapshot.completed_count == 2


def test_reconcile_is_deterministic():
    orders = [_order(1, OrderStatus.PENDING), _order(2, OrderStatus.COOKING)]
    now = datetime(2026, 1, 5, 9, 0, 0)

    first = reconcile_board(BoardView.ADMIN, orders, now=now)
    second = reconcile_board(BoardView.ADMIN, list(reversed(orders)), now=now)

    assert first == second


def test_version_changes_with_status():
    before = reconcile_board(BoardView.STAFF, [_order(1, OrderStatus.PENDING)])
    after = reconcile_board(BoardView.STAFF, [_order(1, OrderStatus.COOKING)])

    assert before.version != after.version


def test_board_access_by_role():
    assert can_view_board(BoardView.KITCHEN, UserRole.KITCHEN)
    assert not can_view_board(BoardView.STAFF, UserRole.KITCHEN)
    assert not can_view_board(BoardView.ADMIN, UserRole.STAFF)
    assert can_view_board(BoardView.CUSTOMER, UserRole.CUSTOMER)


def test_feed_skips_unchanged_refreshes():
    orders = [_order(1, OrderStatus.PENDING)]

    async def fetch():
        return list(orders)

    async def scenario():
        feed = BoardFeed(BoardView.KITCHEN, fetch)

        first = await feed.refresh()
        repeat = await feed.refresh()
        orders.append(_order(2, OrderStatus.PENDING, minutes=1))
        changed = await feed.refresh()
        return first, repeat, changed

    first, repeat, changed = asyncio.run(scenario())

    assert first is not None
    assert repeat is None
    assert [o.id for o in changed.columns["pending"]] == [1, 2]


def test_feed_collapses_bursts_and_filters_events():
    async def fetch():
        return []

    async def scenario():
        feed = BoardFeed(BoardView.CUSTOMER, fetch, relevant=lambda e: e.customer_id == "me")

        feed.notify(_event(1, customer_id="someone-else"))
        ignored = feed._dirty.is_set()

        feed.notify(_event(2, customer_id="me"))
        feed.notify(_event(3, customer_id="me"))
        await asyncio.wait_for(feed.wait_for_change(), timeout=1)
        return ignored, feed._dirty.is_set()

    ignored, still_dirty = asyncio.run(scenario())

    assert ignored is False
    assert still_dirty is False


def test_bus_delivers_until_unsubscribed():
    received = []

    async def async_handler(event):
        received.append(("async", event.order_id))

    async def scenario():
        bus = OrderEventBus()
        unsubscribe = bus.subscribe(lambda event: received.append(("sync", event.order_id)))
        bus.subscribe(async_handler)

        await bus.publish(_event(1))
        unsubscribe()
        await bus.publish(_event(2))
        return bus.subscriber_count

    count = asyncio.run(scenario())

    assert received == [("sync", 1), ("async", 1), ("async", 2)]
    assert count == 1


def test_failing_handler_does_not_stop_others():
    received = []

    def broken(event):
        raise RuntimeError("board went away")

    async def scenario():
        bus = OrderEventBus()
        bus.subscribe(broken)
        bus.subscribe(lambda event: received.append(event.order_id))
        await bus.publish(_event(5))

    asyncio.run(scenario())

    assert received == [5]
