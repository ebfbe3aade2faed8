import itertools

import pytest
from common.choices import OrderStatus
from common.errors import StateConflictError
from orders.transitions import can_transition, ensure_transition

ALLOWED = {
    (OrderStatus.PENDING, OrderStatus.PROCESSING),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
}


@pytest.mark.parametrize("current,new", list(itertools.product(OrderStatus.values, repeat=2)))
def test_transition_table_is_exact(current, new):
    assert can_transition(current, new) == ((current, new) in ALLOWED)


@pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
def test_terminal_states_have_no_exit(terminal):
    assert not any(can_transition(terminal, new) for new in OrderStatus.values)


def test_rejection_names_both_states():
    with pytest.raises(StateConflictError) as exc:
        ensure_transition(OrderStatus.PENDING, OrderStatus.DELIVERED)

    assert exc.value.message == "Cannot transition from PENDING to DELIVERED"
