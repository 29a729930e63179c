"""Order and OrderItem: the immutable record a checkout leaves behind.

An order is written once, together with its items, inside the checkout unit
of work. Afterwards only ``status`` and ``updated_at`` may change. Items carry
a snapshot of the product name and unit price at purchase time and keep only
a soft reference to the product, so later catalogue edits or deletions never
rewrite history.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from ordering.domain import ordering
from shared.money import line_total


def utcnow() -> datetime:
    return datetime.now(UTC)


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


# Fields that may change after the order has been written
MUTABLE_ORDER_FIELDS = frozenset({"status", "updated_at"})

FROZEN_ORDER_FIELDS = (
    "user_id",
    "customer_name",
    "customer_email",
    "phone",
    "address",
    "total_cents",
    "created_at",
)

ITEM_FIELDS = ("product_id", "product_name", "quantity", "price_cents", "line_number")


@ordering.entity(part_of="Order", schema_name="order_items", limit=None)
class OrderItem:
    """One purchased line: a product snapshot, a quantity and the unit price paid."""

    # Soft reference: the product may be deleted later
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price_cents = Integer(required=True, min_value=0)
    line_number = Integer(default=0)

    @property
    def subtotal_cents(self) -> int:
        return line_total(self.price_cents, self.quantity)


@ordering.aggregate(schema_name="orders")
class Order:
    user_id = Identifier()  # None for guest checkout
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    phone = String(required=True, max_length=50)
    address = Text(required=True)
    total_cents = Integer(required=True, min_value=0)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime()
    items = HasMany(OrderItem)

    @property
    def sorted_items(self) -> list[OrderItem]:
        return sorted(self.items or [], key=lambda item: item.line_number)

    @property
    def items_total_cents(self) -> int:
        return sum(item.subtotal_cents for item in self.items or [])

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @invariant.post
    def total_matches_items(self):
        if self.items and self.total_cents != self.items_total_cents:
            raise ValidationError({"total_cents": ["Order total must equal the sum of its items"]})
