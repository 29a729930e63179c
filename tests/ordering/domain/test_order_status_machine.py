from datetime import UTC, datetime

import pytest
from ordering.order.order import Order, OrderStatus
from ordering.order.status import OrderStatusMachine, parse_status
from shared.exceptions import InvalidStatus


def _order(status="pending"):
    return Order(
        id="order-1",
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        phone="+351912345678",
        address="Rua Augusta 100",
        total_cents=1000,
        status=status,
    )


class TestParseStatus:
    @pytest.mark.parametrize("value", OrderStatus.values())
    def test_known_statuses(self, value):
        assert parse_status(value).value == value

    def test_unknown_status(self):
        with pytest.raises(InvalidStatus) as exc:
            parse_status("lost")
        assert exc.value.allowed == OrderStatus.values()


class TestPermissiveMachine:
    def test_any_known_status_is_accepted(self):
        machine = OrderStatusMachine()
        for current in OrderStatus:
            assert machine.allowed_targets(current) == set(OrderStatus)

    def test_delivered_back_to_pending_is_allowed(self):
        order = _order("delivered")
        OrderStatusMachine().set_status(order, "pending")
        assert order.status == "pending"

    def test_set_status_stamps_updated_at(self):
        order = _order()
        now = datetime(2026, 1, 16, 12, 0, tzinfo=UTC)

        OrderStatusMachine().set_status(order, OrderStatus.SHIPPED, now=now)

        assert order.status == "shipped"
        assert order.updated_at == now

    def test_unknown_status_leaves_order_unchanged(self):
        order = _order("pending")

        with pytest.raises(InvalidStatus):
            OrderStatusMachine().set_status(order, "lost")

        assert order.status == "pending"
        assert order.updated_at is None


class TestStrictMachine:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "processing"),
            ("processing", "shipped"),
            ("shipped", "delivered"),
            ("pending", "cancelled"),
            ("shipped", "cancelled"),
        ],
    )
    def test_forward_transitions(self, current, target):
        assert OrderStatusMachine(strict=True).can_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            ("delivered", "pending"),
            ("cancelled", "processing"),
            ("shipped", "pending"),
            ("pending", "delivered"),
        ],
    )
    def test_rejected_transitions(self, current, target):
        order = _order(current)

        with pytest.raises(InvalidStatus):
            OrderStatusMachine(strict=True).set_status(order, target)

        assert order.status == current

    def test_terminal_states_have_no_targets(self):
        machine = OrderStatusMachine(strict=True)
        assert machine.allowed_targets("delivered") == set()
        assert machine.allowed_targets("cancelled") == set()
