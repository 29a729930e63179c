"""BDD tests for who may read an order."""

from pytest_bdd import parsers, scenarios, then, when

from identity.context import AuthContext
from identity.roles import Role
from ordering.order.viewing import view_order
from shared.exceptions import Forbidden

scenarios("features/order_access.feature")


def _view(ctx, order, outcome):
    try:
        outcome["result"] = view_order(ctx, order.id)
    except Forbidden as exc:
        outcome["exc"] = exc


@when(parsers.cfparse('"{user}" asks to see the order'))
def user_views_order(order, outcome, user):
    _view(AuthContext.for_user(user), order, outcome)


@when("an admin asks to see the order")
def admin_views_order(order, outcome):
    _view(AuthContext.for_user("admin", [Role.ADMIN]), order, outcome)


@then(parsers.cfparse("the order is shown with {count:d} items"))
def order_is_shown(order, outcome, count):
    assert outcome["exc"] is None
    assert outcome["result"].id == order.id
    assert len(outcome["result"].items) == count
