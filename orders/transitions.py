"""Order lifecycle allow-list.

Only the edges listed here are valid; nothing is inferred transitively.
DELIVERED and CANCELLED are terminal.
"""

from common.choices import OrderStatus
from common.errors import StateConflictError

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, new: str) -> None:
    if not can_transition(current, new):
        raise StateConflictError(f"Cannot transition from {current} to {new}")
