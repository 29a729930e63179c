"""ProductRepository: product lookups and the atomic stock decrement used at checkout."""

from collections.abc import Iterable

import structlog
from protean import UnitOfWork
from sqlalchemy import select, update

from inventory.domain import inventory
from inventory.product import Product

logger = structlog.get_logger(__name__)


@inventory.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id) -> Product | None:
        return self.get_or_none(str(product_id))

    def list_all(self) -> list[Product]:
        """Every product, newest first."""
        return self.query.order_by("-created_at").limit(None).all().items

    def get_many(self, product_ids: Iterable) -> dict[str, Product]:
        ids = sorted({str(product_id) for product_id in product_ids})
        if not ids:
            return {}
        products = self.query.filter(id__in=ids).limit(None).all().items
        return {product.id: product for product in products}

    def decrement_stock_if_available(self, product_id, quantity: int) -> bool:
        """Take ``quantity`` units out of stock only if that many are left.

        Issued as one conditional UPDATE on the session of the active unit of
        work, so the storage engine arbitrates between concurrent checkouts.
        The row version is bumped too: an admin edit based on an older read
        fails instead of writing the old stock back. Returns False when no
        row qualified.
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        table = self._database_model.__table__
        with UnitOfWork():
            session = self._dao._get_session()
            result = session.execute(
                update(table)
                .where(table.c.id == str(product_id), table.c.stock >= quantity)
                .values(stock=table.c.stock - quantity, _version=table.c["_version"] + 1)
            )
            decremented = result.rowcount == 1

        if not decremented:
            logger.debug("Conditional stock decrement matched no row", product_id=product_id, quantity=quantity)
        return decremented

    def current_stock(self, product_id) -> int | None:
        """Stock as stored right now, bypassing any product already loaded in the session."""
        table = self._database_model.__table__
        with UnitOfWork():
            session = self._dao._get_session()
            return session.execute(select(table.c.stock).where(table.c.id == str(product_id))).scalar_one_or_none()

    def remove(self, product: Product) -> None:
        self._dao.delete(product)
