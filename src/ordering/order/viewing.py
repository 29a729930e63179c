"""Order read paths, each gated by the AuthorizationGuard."""

import structlog

from identity.context import AuthContext
from identity.guard import require_admin, require_authenticated, require_owner_or_role
from identity.roles import Role
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.status import parse_status
from shared.exceptions import Forbidden

logger = structlog.get_logger(__name__)


def view_order(ctx: AuthContext, order_id) -> Order:
    """Return an order with its items for its owner or an admin.

    Non-admins get ``Forbidden`` for missing orders too, so a denied request
    cannot be used to discover which order numbers exist.
    """
    require_authenticated(ctx)
    orders = ordering.repository_for(Order)

    order = orders.find(order_id)
    if order is None:
        if ctx.has_role(Role.ADMIN):
            orders.get(order_id)  # raises ObjectNotFoundError
        logger.info("Order view denied", order_id=order_id, user_id=ctx.user_id)
        raise Forbidden()

    try:
        require_owner_or_role(ctx, order.user_id, Role.ADMIN)
    except Forbidden:
        logger.info("Order view denied", order_id=order_id, user_id=ctx.user_id)
        raise

    return order


def list_my_orders(ctx: AuthContext) -> list[Order]:
    require_authenticated(ctx)
    return ordering.repository_for(Order).list_for_user(ctx.user_id)


def list_orders(ctx: AuthContext, status: str | None = None, search: str | None = None) -> list[Order]:
    require_admin(ctx)
    if status:
        status = parse_status(status).value
    return ordering.repository_for(Order).list_all(status=status, search=search)


def status_counts(ctx: AuthContext) -> dict[str, int]:
    require_admin(ctx)
    return ordering.repository_for(Order).status_counts()
