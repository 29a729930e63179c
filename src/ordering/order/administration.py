"""Admin order mutations."""

from protean import UnitOfWork

from identity.context import AuthContext
from identity.guard import require_admin
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.status import OrderStatusMachine
from shared.config import get_settings


def update_order_status(ctx: AuthContext, order_id, new_status, machine: OrderStatusMachine | None = None) -> Order:
    """Set an order's status on behalf of an admin, committing on success."""
    require_admin(ctx)
    machine = machine or OrderStatusMachine(strict=get_settings().strict_order_transitions)

    with UnitOfWork():
        orders = ordering.repository_for(Order)
        order = orders.get(order_id)
        machine.set_status(order, new_status)
        orders.add(order)

    return order
