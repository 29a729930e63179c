"""Session-scoped shopping cart.

The cart is a mapping of product id to desired quantity kept inside the
visitor's session, in insertion order. It stores no prices: names, prices and
stock are joined from the product store every time the cart is read, so cart
totals follow live pricing until checkout freezes them into an order.

Stock checks on mutation are best effort; the authoritative check is the
conditional stock decrement performed at checkout.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from inventory.domain import inventory
from inventory.product import Product
from shared.exceptions import InsufficientStock
from shared.money import line_total

logger = structlog.get_logger(__name__)

SESSION_CART_KEY = "cart"


@dataclass(frozen=True)
class CartLine:
    """A cart entry joined with the product's current details."""

    product_id: str
    name: str
    description: str | None
    unit_price_cents: int
    stock: int
    image_path: str | None
    quantity: int

    @property
    def subtotal_cents(self) -> int:
        return line_total(self.unit_price_cents, self.quantity)


@dataclass(frozen=True)
class StockConflict:
    product_id: str
    product_name: str | None  # None when the product no longer exists
    available: int
    requested: int

    @property
    def product_missing(self) -> bool:
        return self.product_name is None

    @property
    def message(self) -> str:
        if self.product_missing:
            return f"Product ID {self.product_id} no longer exists"
        return f"Insufficient stock for '{self.product_name}'. Available: {self.available}, Requested: {self.requested}"


class CartStore:
    def __init__(self, session, products=None):
        self.session = session
        self.products = products if products is not None else inventory.repository_for(Product)

    # -------------------------------------------------------------------
    # Raw state
    # -------------------------------------------------------------------
    @property
    def _items(self) -> dict[str, int]:
        return self.session.setdefault(SESSION_CART_KEY, {})

    def entries(self) -> list[tuple[str, int]]:
        """Snapshot of ``(product_id, quantity)`` pairs in insertion order."""
        return list(self._items.items())

    def quantity_of(self, product_id) -> int:
        return self._items.get(str(product_id), 0)

    def count(self) -> int:
        return sum(self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, product_id, quantity: int = 1) -> None:
        """Add ``quantity`` units, merging with any quantity already in the cart."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        product = self.products.get(product_id)
        key = str(product.id)
        new_quantity = self._items.get(key, 0) + quantity

        if new_quantity > product.stock:
            raise InsufficientStock(product.id, product.name, available=product.stock, requested=new_quantity)

        self._items[key] = new_quantity
        logger.debug("Cart item added", product_id=product.id, quantity=new_quantity)

    def set_quantity(self, product_id, quantity: int) -> None:
        """Replace the quantity of a product; zero or less removes it."""
        if quantity <= 0:
            self.remove(product_id)
            return

        product = self.products.get(product_id)
        if quantity > product.stock:
            raise InsufficientStock(product.id, product.name, available=product.stock, requested=quantity)

        self._items[str(product.id)] = quantity
        logger.debug("Cart quantity updated", product_id=product.id, quantity=quantity)

    def remove(self, product_id) -> None:
        self._items.pop(str(product_id), None)

    def clear(self) -> None:
        self.session[SESSION_CART_KEY] = {}

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def list(self) -> Iterator[CartLine]:
        """Yield cart lines in insertion order, skipping products that no longer exist."""
        entries = self.entries()
        if not entries:
            return

        products = self.products.get_many(product_id for product_id, _ in entries)
        for product_id, quantity in entries:
            product = products.get(product_id)
            if product is None:
                continue
            yield CartLine(
                product_id=product.id,
                name=product.name,
                description=product.description,
                unit_price_cents=product.price_cents,
                stock=product.stock,
                image_path=product.image_path,
                quantity=quantity,
            )

    def total(self) -> int:
        """Cart total in cents at current prices."""
        return sum(line.subtotal_cents for line in self.list())

    def stock_conflicts(self) -> list[StockConflict]:
        """Every entry that could not be fulfilled right now. The cart is left untouched."""
        entries = self.entries()
        products = self.products.get_many(product_id for product_id, _ in entries)

        conflicts = []
        for product_id, quantity in entries:
            product = products.get(product_id)
            if product is None:
                conflicts.append(StockConflict(product_id=product_id, product_name=None, available=0, requested=quantity))
            elif quantity > product.stock:
                conflicts.append(
                    StockConflict(
                        product_id=product_id,
                        product_name=product.name,
                        available=product.stock,
                        requested=quantity,
                    )
                )
        return conflicts

    def validate_against_stock(self) -> list[str]:
        """Human-readable descriptions of :meth:`stock_conflicts`."""
        return [conflict.message for conflict in self.stock_conflicts()]
