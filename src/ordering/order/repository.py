"""Order persistence and admin search queries."""

from protean import Q
from protean.exceptions import ValidationError

from ordering.domain import ordering
from ordering.order.order import FROZEN_ORDER_FIELDS, ITEM_FIELDS, Order, OrderStatus


def _item_snapshot(order: Order) -> list[tuple]:
    return sorted(tuple([item.id, *(getattr(item, name) for name in ITEM_FIELDS)]) for item in order.items or [])


@ordering.repository(part_of=Order)
class OrderRepository:
    def add(self, order: Order) -> Order:
        """Persist ``order``; once written, only its status may change."""
        if order.state_.is_persisted:
            self._ensure_unchanged(order)
        return super().add(order)

    def _ensure_unchanged(self, order: Order) -> None:
        stored = self._dao.get(order.id)

        changed = sorted(name for name in FROZEN_ORDER_FIELDS if getattr(order, name) != getattr(stored, name))
        if changed:
            raise ValidationError({name: ["Order fields cannot change after checkout"] for name in changed})

        if _item_snapshot(order) != _item_snapshot(stored):
            raise ValidationError({"items": ["Order items cannot change after checkout"]})

    def find(self, order_id) -> Order | None:
        return self.get_or_none(str(order_id))

    def list_for_user(self, user_id) -> list[Order]:
        return self.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items

    def list_all(self, status: str | None = None, search: str | None = None) -> list[Order]:
        """All orders, newest first, optionally filtered by status and a free-text search.

        The search matches customer name or email substrings, or an exact
        order number.
        """
        query = self.query.order_by("-created_at").limit(None)

        if status:
            query = query.filter(status=status)

        if search and search.strip():
            term = search.strip()
            query = query.filter(Q(customer_name__icontains=term) | Q(customer_email__icontains=term) | Q(id=term))

        return query.all().items

    def status_counts(self) -> dict[str, int]:
        return {status.value: self.query.filter(status=status.value).all().total for status in OrderStatus}
