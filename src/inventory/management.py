"""Admin product management.

Every operation requires ``ROLE_ADMIN``. Prices arrive as decimal amounts and
are stored as cents; deleting a product leaves order history untouched
because order items only keep a soft reference to it.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from identity.context import AuthContext
from identity.guard import require_admin
from inventory.domain import inventory
from inventory.product import Product
from shared.money import to_minor_units

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = ("name", "description", "price", "stock", "image_path")


def _validated(fields: dict) -> dict:
    """Check and normalise submitted product fields, collecting every error."""
    errors: dict[str, list[str]] = {}
    values = {}

    if "name" in fields:
        name = (fields["name"] or "").strip()
        if not name:
            errors["name"] = ["Name is required"]
        values["name"] = name

    if "price" in fields:
        try:
            price_cents = to_minor_units(fields["price"])
        except ValidationError as exc:
            errors.update(exc.messages)
        else:
            if price_cents <= 0:
                errors["price"] = ["Price must be greater than zero"]
            values["price_cents"] = price_cents

    if "stock" in fields:
        stock = fields["stock"]
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            errors["stock"] = ["Stock must be a whole number of zero or more"]
        values["stock"] = stock

    for optional in ("description", "image_path"):
        if optional in fields:
            values[optional] = (fields[optional] or "").strip() or None

    if errors:
        raise ValidationError(errors)
    return values


def _get_product(product_id) -> Product:
    product = inventory.repository_for(Product).find(product_id)
    if product is None:
        raise ObjectNotFoundError(f"Product {product_id} not found")
    return product


def create_product(ctx: AuthContext, name, price, stock=0, description=None, image_path=None) -> Product:
    require_admin(ctx)
    values = _validated(
        {"name": name, "price": price, "stock": stock, "description": description, "image_path": image_path}
    )

    product = Product(**values)
    inventory.repository_for(Product).add(product)

    logger.info("Product created", product_id=product.id, user_id=ctx.user_id)
    return product


def update_product(ctx: AuthContext, product_id, **changes) -> Product:
    """Apply a partial update; unknown field names are rejected."""
    require_admin(ctx)

    unknown = sorted(set(changes) - set(_UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError({field: ["Unknown field"] for field in unknown})

    values = _validated(changes)

    product = _get_product(product_id)
    for attribute, value in values.items():
        setattr(product, attribute, value)
    product.updated_at = datetime.now(UTC)
    inventory.repository_for(Product).add(product)

    logger.info("Product updated", product_id=product.id, fields=sorted(values), user_id=ctx.user_id)
    return product


def delete_product(ctx: AuthContext, product_id) -> None:
    require_admin(ctx)

    inventory.repository_for(Product).remove(_get_product(product_id))

    logger.info("Product deleted", product_id=product_id, user_id=ctx.user_id)
