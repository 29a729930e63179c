"""CheckoutCoordinator: turns a cart into a persisted order without overselling.

Flow:
    1. Reject an empty cart and pre-check the cart against current stock
       (cheap early failure).
    2. In one unit of work: snapshot product names and prices, add the order
       and its items with the server-computed total, then for each cart line
       take the stock with a conditional decrement. Any line whose decrement
       matches no row aborts and rolls back everything.
    3. After commit: clear the cart, then send the confirmation email on a
       best-effort basis.

The conditional decrement is the only stock write made by checkout. Reading
stock and writing ``stock - n`` back would let two concurrent checkouts pass
the same check and both write.
"""

import structlog
from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError, TransactionError
from sqlalchemy.exc import SQLAlchemyError

from identity.context import AuthContext
from inventory.domain import inventory
from inventory.product import Product
from ordering.cart.cart import CartStore
from ordering.checkout.details import CustomerDetails
from ordering.domain import ordering
from ordering.order.order import Order, OrderItem, OrderStatus
from shared.exceptions import EmptyCart, InsufficientStock, PersistenceFailure
from shared.money import line_total

logger = structlog.get_logger(__name__)


class CheckoutCoordinator:
    def __init__(self, notifier=None):
        self.notifier = notifier

    def checkout(self, cart: CartStore, ctx: AuthContext, details: CustomerDetails) -> str:
        """Place an order for the cart's contents and return the new order id."""
        if cart.is_empty():
            raise EmptyCart()

        self._precheck_stock(cart)

        entries = cart.entries()

        try:
            with UnitOfWork():
                order = self._place_order(entries, ctx, details)
        except (InsufficientStock, ObjectNotFoundError) as exc:
            logger.warning("Checkout rejected", user_id=ctx.user_id, reason=str(exc))
            raise
        except (SQLAlchemyError, TransactionError) as exc:
            logger.exception("Checkout failed in the storage layer", user_id=ctx.user_id, error=str(exc))
            raise PersistenceFailure() from exc

        cart.clear()

        logger.info(
            "Order placed",
            order_id=order.id,
            user_id=ctx.user_id,
            total_cents=order.total_cents,
            item_count=len(order.items),
        )

        self._notify(order, details.email)
        return order.id

    def _precheck_stock(self, cart: CartStore) -> None:
        conflicts = cart.stock_conflicts()
        if not conflicts:
            return

        conflict = conflicts[0]
        logger.info("Cart failed the stock pre-check", conflicts=[c.message for c in conflicts])
        if conflict.product_missing:
            raise ObjectNotFoundError(conflict.message)
        raise InsufficientStock(
            conflict.product_id,
            conflict.product_name,
            available=conflict.available,
            requested=conflict.requested,
        )

    def _place_order(self, entries, ctx: AuthContext, details: CustomerDetails) -> Order:
        products = inventory.repository_for(Product)

        # Names and prices are frozen here; later catalogue edits never reach the order
        current = products.get_many(product_id for product_id, _ in entries)
        items = []
        for line_number, (product_id, quantity) in enumerate(entries, start=1):
            product = current.get(product_id)
            if product is None:
                raise ObjectNotFoundError(f"Product ID {product_id} no longer exists")
            items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    price_cents=product.price_cents,
                    line_number=line_number,
                )
            )

        order = Order(
            user_id=ctx.user_id,
            customer_name=details.name,
            customer_email=details.email,
            phone=details.phone,
            address=details.address,
            total_cents=sum(line_total(item.price_cents, item.quantity) for item in items),
            status=OrderStatus.PENDING.value,
            items=items,
        )
        ordering.repository_for(Order).add(order)

        for item in items:
            if not products.decrement_stock_if_available(item.product_id, item.quantity):
                available = products.current_stock(item.product_id)
                raise InsufficientStock(item.product_id, item.product_name, available=available, requested=item.quantity)

        return order

    def _notify(self, order: Order, recipient: str) -> bool:
        if self.notifier is None:
            return False

        try:
            delivered = self.notifier.notify_order_created(order, order.sorted_items, recipient)
        except Exception:
            # The order is committed; a mail failure must not surface as a checkout failure
            logger.warning("Order confirmation could not be sent", order_id=order.id, exc_info=True)
            return False

        if not delivered:
            logger.warning("Order confirmation was not delivered", order_id=order.id)
        return bool(delivered)
