"""Product aggregate: the catalogue entry whose stock level checkout draws down.

Prices are integer minor units. Stock can never go negative: the aggregate
rejects it, and checkout only ever takes stock through a conditional update
that matches no row when too little is left.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text

from inventory.domain import inventory


def utcnow() -> datetime:
    return datetime.now(UTC)


@inventory.aggregate(schema_name="products")
class Product:
    """Something the shop sells, with its current price and units on hand."""

    name: String(required=True, max_length=255)
    description: Text()
    price_cents: Integer(required=True, min_value=0)
    stock: Integer(default=0)
    image_path: String(max_length=500)
    created_at: DateTime(default=utcnow)
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock must be a whole number of zero or more"]})
