"""
In-process publish/subscribe for order changes.

Every committed order write publishes an ``OrderEvent``. Subscribers treat an
event only as a cue to re-fetch; the payload is informational, and duplicate
or out-of-order delivery is harmless because views are rebuilt from the
latest fetch.
"""
import inspect
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Union


logger = logging.getLogger(__name__)


ORDER_CREATED = "order.created"
ORDER_STATUS_CHANGED = "order.status_changed"
ORDER_PAYMENT_UPDATED = "order.payment_updated"


@dataclass(frozen=True)
class OrderEvent:
    kind: str
    order_id: int
    order_number: str
    status: str
    customer_id: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=datetime.utcnow)


EventHandler = Callable[[OrderEvent], Union[Awaitable[Any], Any]]


class OrderEventBus:
    """In-memory event bus for order change notifications."""

    def __init__(self) -> None:
        self._subscribers: List[EventHandler] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler``; returns a callable that removes it again."""
        self._subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    async def publish(self, event: OrderEvent) -> None:
        logger.debug("Publishing %s for order %s", event.kind, event.order_number)
        for handler in list(self._subscribers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # the write is already committed; a broken board must not undo the caller's response
                logger.exception("Order event handler %r failed for %s", handler, event.event_id)


def event_for(kind: str, order) -> OrderEvent:
    return OrderEvent(
        kind=kind,
        order_id=order.id,
        order_number=order.order_number,
        status=getattr(order.status, "value", order.status),
        customer_id=order.customer_id,
    )
