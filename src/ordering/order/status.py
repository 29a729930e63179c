"""OrderStatusMachine: validates and applies order status changes.

The default machine is permissive: an admin may set any of the five known
statuses at any time, which doubles as a manual override. ``strict=True``
opts into a forward-only graph with ``delivered`` and ``cancelled`` terminal.
Authorization is not checked here; callers gate on ``ROLE_ADMIN`` first.
"""

from datetime import UTC, datetime

import structlog

from ordering.order.order import Order, OrderStatus
from shared.exceptions import InvalidStatus

logger = structlog.get_logger(__name__)

# Forward-only transition map used in strict mode
_STRICT_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(value, OrderStatus.values()) from None


class OrderStatusMachine:
    def __init__(self, strict: bool = False):
        self.strict = strict

    def allowed_targets(self, current) -> set[OrderStatus]:
        if not self.strict:
            return set(OrderStatus)
        return set(_STRICT_TRANSITIONS[parse_status(current)])

    def can_transition(self, current, target) -> bool:
        return parse_status(target) in self.allowed_targets(current)

    def set_status(self, order: Order, new_status, now: datetime | None = None) -> Order:
        """Move ``order`` to ``new_status`` and stamp ``updated_at``.

        Raises ``InvalidStatus`` for unknown statuses, and in strict mode for
        transitions the graph does not allow; the order is left untouched.
        """
        target = parse_status(new_status)
        current = parse_status(order.status)

        if self.strict and target not in _STRICT_TRANSITIONS[current]:
            raise InvalidStatus(
                target.value,
                sorted(status.value for status in _STRICT_TRANSITIONS[current]),
            )

        order.status = target.value
        order.updated_at = now or datetime.now(UTC)

        logger.info(
            "Order status changed",
            order_id=order.id,
            previous_status=current.value,
            new_status=target.value,
        )
        return order
