"""Shared BDD fixtures and step definitions for the Ordering context."""

import pytest
from pytest_bdd import given, parsers, then

from ordering.domain import ordering
from ordering.order.order import Order
from shared.exceptions import Forbidden
from shared.money import to_minor_units


# ---------------------------------------------------------------------------
# Scenario state
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def outcome():
    """Result of the scenario's action: a value or the exception it raised."""
    return {"result": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price} with {stock:d} in stock'))
def _(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price_cents=to_minor_units(price), stock=stock)


@given(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def _(cart, products, quantity, name):
    cart.add(products[name].id, quantity)


@given(parsers.cfparse('only {stock:d} of "{name}" remains in stock'))
def _(edit_product, products, stock, name):
    edit_product(products[name].id, stock=stock)


@given(parsers.cfparse('an order placed by "{owner}"'), target_fixture="order")
def _(place_order, owner):
    return place_order(user_id=owner, items=(("product-1", "Keyboard", 2, 1000), ("product-2", "Mouse Pad", 1, 550)))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} left in stock'))
def _(product_stock, products, name, stock):
    assert product_stock(products[name].id) == stock


@then(parsers.cfparse('the cart still holds {quantity:d} of "{name}"'))
def _(cart, products, quantity, name):
    assert cart.quantity_of(products[name].id) == quantity


@then("the cart is empty")
def _(cart):
    assert cart.is_empty()


@then("no order is placed")
def _(order_count):
    assert order_count() == 0


@then(parsers.cfparse('the stored order status is "{status}"'))
def _(order, status):
    assert ordering.repository_for(Order).get(order.id).status == status


@then("access is forbidden")
def _(outcome):
    assert isinstance(outcome["exc"], Forbidden)
