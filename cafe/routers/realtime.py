import asyncio
import logging
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import async_sessionmaker
from typing import Optional

from ..core.dependencies import auth_service, get_session_factory
from ..core.token_bearer import decode_token
from ..enums import BoardView
from ..exceptions import InvalidTokenException
from ..schemas.order import OrderDetail
from ..services.order_board import BoardFeed, can_view_board
from ..services.order_service import OrderService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/orders")
async def order_board_socket(
    websocket: WebSocket,
    view: BoardView = Query(BoardView.CUSTOMER),
    token: Optional[str] = Query(None),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """
    Push a board snapshot on connect and again whenever the board's content
    changes. Browsers can't set headers on websockets, so the bearer token
    travels in the ``token`` query parameter.
    """
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        claims = decode_token(token)
    except InvalidTokenException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    async with session_factory() as db:
        user = await auth_service.get_or_create_profile(claims, db)

    if not can_view_board(view, user.role):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    async def fetch():
        async with session_factory() as db:
            orders = await OrderService(db).list_for_board(view, user)
            return [OrderDetail.model_validate(order) for order in orders]

    relevant = None
    if view == BoardView.CUSTOMER:
        relevant = lambda event: event.customer_id == user.id  # noqa: E731

    feed = BoardFeed(view, fetch, relevant)
    unsubscribe = websocket.app.state.order_events.subscribe(feed.notify)

    await websocket.accept()
    logger.info("Board socket opened: %s view for %s", view.value, user.id)

    waiter = receiver = None
    try:
        snapshot = await feed.refresh()
        await websocket.send_json(snapshot.model_dump(mode="json"))

        waiter = asyncio.create_task(feed.wait_for_change())
        receiver = asyncio.create_task(websocket.receive_text())

        while True:
            done, _ = await asyncio.wait({waiter, receiver}, return_when=asyncio.FIRST_COMPLETED)

            if receiver in done:
                # raises WebSocketDisconnect once the client goes away; other messages are ignored
                receiver.result()
                receiver = asyncio.create_task(websocket.receive_text())

            if waiter in done:
                snapshot = await feed.refresh()
                if snapshot is not None:
                    await websocket.send_json(snapshot.model_dump(mode="json"))
                waiter = asyncio.create_task(feed.wait_for_change())

    except WebSocketDisconnect:
        logger.info("Board socket closed: %s view for %s", view.value, user.id)

    finally:
        unsubscribe()
        for task in (waiter, receiver):
            if task is not None and not task.done():
                task.cancel()
