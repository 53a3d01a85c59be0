"""
Order status transitions and the roles allowed to take them.

    pending -> cooking -> ready -> served
       \          |         /
        +---> cancelled <--+

``served`` and ``cancelled`` are terminal. Asking for the status an active
order already has is accepted as a no-op, so duplicate clicks from two boards
converge instead of failing.
"""
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from ..enums import OrderAction, OrderStatus, UserRole
from ..exceptions import IllegalTransitionException, TransitionNotPermittedException


BACK_OFFICE = frozenset({UserRole.KITCHEN, UserRole.STAFF, UserRole.ADMIN})
FRONT_OF_HOUSE = frozenset({UserRole.STAFF, UserRole.ADMIN})

INITIAL_STATUS = OrderStatus.PENDING
TERMINAL_STATUSES = frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED})
ACTIVE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.COOKING, OrderStatus.READY})

TRANSITIONS: Dict[Tuple[OrderStatus, OrderStatus], FrozenSet[UserRole]] = {
    (OrderStatus.PENDING, OrderStatus.COOKING): BACK_OFFICE,
    (OrderStatus.COOKING, OrderStatus.READY): BACK_OFFICE,
    (OrderStatus.READY, OrderStatus.SERVED): FRONT_OF_HOUSE,
    (OrderStatus.PENDING, OrderStatus.CANCELLED): FRONT_OF_HOUSE,
    (OrderStatus.COOKING, OrderStatus.CANCELLED): FRONT_OF_HOUSE,
    (OrderStatus.READY, OrderStatus.CANCELLED): FRONT_OF_HOUSE,
}

FORWARD: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.COOKING,
    OrderStatus.COOKING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.SERVED,
}


StatusLike = Union[OrderStatus, str]
RoleLike = Union[UserRole, str]


def is_terminal(status: StatusLike) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def next_status(current: StatusLike) -> Optional[OrderStatus]:
    """Forward successor of ``current``, or ``None`` for terminal statuses."""
    return FORWARD.get(OrderStatus(current))


def can_transition(current: StatusLike, target: StatusLike, role: RoleLike) -> bool:
    roles = TRANSITIONS.get((OrderStatus(current), OrderStatus(target)))
    return roles is not None and UserRole(role) in roles


def allowed_targets(current: StatusLike, role: RoleLike) -> List[OrderStatus]:
    """Statuses ``role`` may move an order in ``current`` to, forward step first."""
    current = OrderStatus(current)
    role = UserRole(role)
    return [
        target
        for (source, target), roles in TRANSITIONS.items()
        if source == current and role in roles
    ]


def transition(current: StatusLike, target: StatusLike, role: RoleLike) -> OrderStatus:
    """
    Validate moving an order from ``current`` to ``target`` as ``role``.

    Returns the resulting status. Raises ``IllegalTransitionException`` for
    pairs outside the table (terminal sources included) and
    ``TransitionNotPermittedException`` when the pair is legal but ``role``
    may not take it.
    """
    current = OrderStatus(current)
    target = OrderStatus(target)
    role = UserRole(role)

    if current in TERMINAL_STATUSES:
        raise IllegalTransitionException(current, target)

    if current == target:
        if role not in BACK_OFFICE:
            raise TransitionNotPermittedException(role, target)
        return current

    roles = TRANSITIONS.get((current, target))
    if roles is None:
        raise IllegalTransitionException(current, target)

    if role not in roles:
        raise TransitionNotPermittedException(role, target)

    return target


def target_for_action(current: StatusLike, action: Union[OrderAction, str]) -> OrderStatus:
    current = OrderStatus(current)
    action = OrderAction(action)

    if action == OrderAction.CANCEL:
        return OrderStatus.CANCELLED

    successor = FORWARD.get(current)
    if successor is None:
        raise IllegalTransitionException(current, action)
    return successor


def apply_action(current: StatusLike, action: Union[OrderAction, str], role: RoleLike) -> OrderStatus:
    return transition(current, target_for_action(current, action), role)
