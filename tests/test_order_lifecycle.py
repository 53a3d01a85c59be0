import pytest

from cafe.domain import order_lifecycle as lifecycle
from cafe.enums import OrderAction, OrderStatus, UserRole
from cafe.exceptions import IllegalTransitionException, TransitionNotPermittedException


@pytest.mark.parametrize(
    "current,target,role",
    [
        (OrderStatus.PENDING, OrderStatus.COOKING, UserRole.KITCHEN),
        (OrderStatus.COOKING, OrderStatus.READY, UserRole.KITCHEN),
        (OrderStatus.READY, OrderStatus.SERVED, UserRole.STAFF),
        (OrderStatus.PENDING, OrderStatus.CANCELLED, UserRole.ADMIN),
        (OrderStatus.READY, OrderStatus.CANCELLED, UserRole.STAFF),
    ],
)
def test_legal_transitions(current, target, role):
    assert lifecycle.transition(current, target, role) == target


@pytest.mark.parametrize("terminal", [OrderStatus.SERVED, OrderStatus.CANCELLED])
@pytest.mark.parametrize("target", list(OrderStatus))
def test_nothing_leaves_a_terminal_status(terminal, target):
    with pytest.raises(IllegalTransitionException):
        lifecycle.transition(terminal, target, UserRole.ADMIN)


def test_skipping_a_step_is_illegal():
    with pytest.raises(IllegalTransitionException) as exc:
        lifecycle.transition(OrderStatus.PENDING, OrderStatus.READY, UserRole.ADMIN)

    assert str(exc.value) == "Cannot move order from pending to ready"


def test_going_backwards_is_illegal():
    with pytest.raises(IllegalTransitionException):
        lifecycle.transition(OrderStatus.READY, OrderStatus.COOKING, UserRole.ADMIN)


def test_kitchen_cannot_serve_or_cancel():
    with pytest.raises(TransitionNotPermittedException):
        lifecycle.transition(OrderStatus.READY, OrderStatus.SERVED, UserRole.KITCHEN)

    with pytest.raises(TransitionNotPermittedException):
        lifecycle.transition(OrderStatus.PENDING, OrderStatus.CANCELLED, UserRole.KITCHEN)


def test_customers_cannot_transition():
    with pytest.raises(TransitionNotPermittedException):
        lifecycle.transition(OrderStatus.PENDING, OrderStatus.COOKING, UserRole.CUSTOMER)

    with pytest.raises(TransitionNotPermittedException):
        lifecycle.transition(OrderStatus.PENDING, OrderStatus.PENDING, UserRole.CUSTOMER)


def test_repeating_the_current_active_status_is_a_noop():
    assert lifecycle.transition(OrderStatus.COOKING, OrderStatus.COOKING, UserRole.KITCHEN) == OrderStatus.COOKING


def test_actions():
    assert lifecycle.apply_action(OrderStatus.PENDING, OrderAction.ADVANCE, UserRole.KITCHEN) == OrderStatus.COOKING
    assert lifecycle.apply_action("ready", "advance", "staff") == OrderStatus.SERVED
    assert lifecycle.apply_action(OrderStatus.COOKING, OrderAction.CANCEL, UserRole.STAFF) == OrderStatus.CANCELLED

    with pytest.raises(IllegalTransitionException):
        lifecycle.apply_action(OrderStatus.SERVED, OrderAction.ADVANCE, UserRole.ADMIN)


def test_helpers():
    assert lifecycle.next_status(OrderStatus.PENDING) == OrderStatus.COOKING
    assert lifecycle.next_status(OrderStatus.SERVED) is None
    assert lifecycle.is_terminal("cancelled")
    assert not lifecycle.is_terminal(OrderStatus.READY)

    assert lifecycle.allowed_targets(OrderStatus.PENDING, UserRole.KITCHEN) == [OrderStatus.COOKING]
    assert lifecycle.allowed_targets(OrderStatus.READY, UserRole.STAFF) == [OrderStatus.SERVED, OrderStatus.CANCELLED]
    assert lifecycle.allowed_targets(OrderStatus.CANCELLED, UserRole.ADMIN) == []
    assert not lifecycle.can_transition(OrderStatus.COOKING, OrderStatus.READY, UserRole.CUSTOMER)
