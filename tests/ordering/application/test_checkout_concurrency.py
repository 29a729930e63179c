"""No-oversell under concurrent checkouts against a shared database."""

import threading
from concurrent.futures import ThreadPoolExecutor

from identity.context import AuthContext
from identity.session import Session, new_session_id
from ordering.cart.cart import CartStore
from ordering.checkout.coordinator import CheckoutCoordinator
from ordering.checkout.details import CustomerDetails
from ordering.domain import ordering
from shared.exceptions import InsufficientStock


def _race(product_id, quantities):
    """Check out one cart per quantity at the same moment; return each outcome."""
    barrier = threading.Barrier(len(quantities))
    coordinator = CheckoutCoordinator()

    def attempt(index, quantity):
        with ordering.domain_context():
            details = CustomerDetails.create(
                name="Jane Doe",
                email="jane@example.com",
                phone="+351 912 345 678",
                address="Rua Augusta 100, Lisboa",
            )
            cart = CartStore(Session(new_session_id()))
            cart.add(product_id, quantity)
            barrier.wait()
            try:
                return coordinator.checkout(cart, AuthContext.for_user(f"user-{index}"), details)
            except InsufficientStock as exc:
                return exc

    with ThreadPoolExecutor(max_workers=len(quantities)) as pool:
        futures = [pool.submit(attempt, index, quantity) for index, quantity in enumerate(quantities)]
        return [future.result() for future in futures]


def test_two_checkouts_for_the_last_units(make_product, product_stock, order_count):
    widget = make_product(name="Widget", stock=3)

    results = _race(widget.id, [2, 2])

    placed = [r for r in results if isinstance(r, str)]
    rejected = [r for r in results if isinstance(r, InsufficientStock)]
    assert len(placed) == 1
    assert len(rejected) == 1
    assert (product_stock(widget.id), order_count()) == (1, 1)


def test_many_buyers_never_oversell(make_product, product_stock, order_count):
    widget = make_product(name="Widget", stock=4)

    results = _race(widget.id, [1] * 6)

    placed = [r for r in results if isinstance(r, str)]
    assert len(placed) == 4
    assert all(isinstance(r, InsufficientStock) for r in results if not isinstance(r, str))
    assert (product_stock(widget.id), order_count()) == (0, 4)
