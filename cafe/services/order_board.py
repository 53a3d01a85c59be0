"""
Order boards for the kitchen, staff, admin and customer views.

``reconcile_board`` is pure: it turns the latest fetch into a snapshot and
never looks at notification payloads. ``BoardFeed`` sits between the event
bus and a connected client: notifications only mark the feed dirty, and a
refresh re-fetches, reconciles and reports whether anything changed.
"""
import asyncio
import hashlib
from datetime import datetime
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from ..domain.order_lifecycle import TERMINAL_STATUSES
from ..enums import BoardView, OrderStatus, UserRole
from ..schemas.board import BoardSnapshot
from ..schemas.order import OrderDetail
from .order_events import OrderEvent


ALL_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.COOKING,
    OrderStatus.READY,
    OrderStatus.SERVED,
    OrderStatus.CANCELLED,
)

BOARD_STATUSES: Dict[BoardView, tuple] = {
    BoardView.KITCHEN: (OrderStatus.PENDING, OrderStatus.COOKING),
    BoardView.STAFF: ALL_STATUSES,
    BoardView.ADMIN: ALL_STATUSES,
    BoardView.CUSTOMER: ALL_STATUSES,
}

# None means any signed-in user; customer boards are filtered to their own orders
BOARD_ROLES: Dict[BoardView, Optional[tuple]] = {
    BoardView.KITCHEN: (UserRole.KITCHEN, UserRole.STAFF, UserRole.ADMIN),
    BoardView.STAFF: (UserRole.STAFF, UserRole.ADMIN),
    BoardView.ADMIN: (UserRole.ADMIN,),
    BoardView.CUSTOMER: None,
}


def can_view_board(view: BoardView, role: UserRole) -> bool:
    roles = BOARD_ROLES[view]
    return roles is None or role in roles


def _version(orders: Iterable[OrderDetail]) -> str:
    digest = hashlib.sha1()
    for order in sorted(orders, key=lambda o: o.id):
        digest.update(
            f"{order.id}:{order.status.value}:{order.payment_status.value}:{order.updated_at}:{len(order.items)};".encode()
        )
    return digest.hexdigest()


def reconcile_board(
    view: BoardView,
    orders: Sequence,
    now: Optional[datetime] = None,
) -> BoardSnapshot:
    """
    Group ``orders`` (ORM rows or ``OrderDetail``) into the columns of ``view``.

    Active columns are oldest first so the kitchen works in arrival order;
    terminal columns are newest first.
    """
    statuses = BOARD_STATUSES[view]
    details = [o if isinstance(o, OrderDetail) else OrderDetail.model_validate(o) for o in orders]
    visible = [o for o in details if o.status in statuses]

    columns: Dict[str, List[OrderDetail]] = {}
    for status in statuses:
        in_column = [o for o in visible if o.status == status]
        in_column.sort(key=lambda o: (o.created_at, o.id), reverse=status in TERMINAL_STATUSES)
        columns[status.value] = in_column

    completed = sum(1 for o in visible if o.status in TERMINAL_STATUSES)

    return BoardSnapshot(
        view=view,
        columns=columns,
        active_count=len(visible) - completed,
        completed_count=completed,
        version=_version(visible),
        generated_at=now or datetime.utcnow(),
    )


class BoardFeed:
    """
    Keeps one client's board in step with the order collection.

    Bursts of notifications collapse into a single pending refresh, and a
    refresh that yields the same content as last time returns ``None``.
    """

    def __init__(
        self,
        view: BoardView,
        fetch: Callable[[], Awaitable[Sequence]],
        relevant: Optional[Callable[[OrderEvent], bool]] = None,
    ) -> None:
        self.view = view
        self.fetch = fetch
        self.relevant = relevant
        self.latest: Optional[BoardSnapshot] = None
        self._dirty = asyncio.Event()

    def notify(self, event: OrderEvent) -> None:
        if self.relevant is None or self.relevant(event):
            self._dirty.set()

    async def wait_for_change(self) -> None:
        await self._dirty.wait()
        self._dirty.clear()

    async def refresh(self) -> Optional[BoardSnapshot]:
        snapshot = reconcile_board(self.view, await self.fetch())
        if self.latest is not None and snapshot.version == self.latest.version:
            return None
        self.latest = snapshot
        return snapshot
