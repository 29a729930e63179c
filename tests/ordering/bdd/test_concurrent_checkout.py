"""BDD tests for the no-oversell guarantee under concurrent checkouts."""

import threading
from concurrent.futures import ThreadPoolExecutor

from pytest_bdd import parsers, scenarios, then, when

from identity.context import AuthContext
from identity.session import Session, new_session_id
from ordering.cart.cart import CartStore
from ordering.checkout.coordinator import CheckoutCoordinator
from ordering.checkout.details import CustomerDetails
from ordering.domain import ordering
from shared.exceptions import InsufficientStock

scenarios("features/concurrent_checkout.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse('{buyers:d} customers check out {quantity:d} of "{name}" at the same moment'),
    target_fixture="results",
)
def customers_race(products, buyers, quantity, name):
    product_id = products[name].id
    barrier = threading.Barrier(buyers)
    coordinator = CheckoutCoordinator()

    def attempt(index):
        with ordering.domain_context():
            cart = CartStore(Session(new_session_id()))
            cart.add(product_id, quantity)
            details = CustomerDetails.create(
                name=f"Customer {index}",
                email=f"customer{index}@example.com",
                phone="+351 912 345 678",
                address="Rua Augusta 100, Lisboa",
            )
            barrier.wait()
            try:
                return coordinator.checkout(cart, AuthContext.for_user(f"customer-{index}"), details)
            except InsufficientStock as exc:
                return exc

    with ThreadPoolExecutor(max_workers=buyers) as pool:
        return list(pool.map(attempt, range(buyers)))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("exactly one checkout succeeds")
def one_checkout_succeeds(results, order_count):
    assert len([result for result in results if isinstance(result, str)]) == 1
    assert order_count() == 1


@then(parsers.cfparse("{placed:d} orders are placed"))
def orders_are_placed(results, order_count, placed):
    assert len([result for result in results if isinstance(result, str)]) == placed
    assert order_count() == placed


@then("every other checkout fails for lack of stock")
def others_fail(results):
    assert all(isinstance(result, InsufficientStock) for result in results if not isinstance(result, str))
