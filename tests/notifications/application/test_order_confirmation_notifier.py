from datetime import UTC, datetime

import pytest
from notifications.channel import get_email_channel
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.notification.order_confirmation import OrderConfirmationNotifier
from ordering.order.order import Order, OrderItem


@pytest.fixture()
def order():
    return Order(
        id="5",
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        phone="+351 912 345 678",
        address="Rua Augusta 100",
        total_cents=1500,
        status="pending",
        created_at=datetime(2026, 1, 16, 12, 0, tzinfo=UTC),
        items=[OrderItem(product_id="product-1", product_name="Widget", quantity=3, price_cents=500)],
    )


class TestNotifyOrderCreated:
    def test_sends_through_the_channel(self, order, email_channel):
        assert OrderConfirmationNotifier().notify_order_created(order, order.items, "jane@example.com")

        sent = email_channel.sent_emails[0]
        assert sent["to"] == "jane@example.com"
        assert sent["subject"].startswith("Order Confirmation #5")
        assert "2026-01-16 12:00:00" in sent["body"]
        assert sent["html_body"]

    def test_reports_a_failed_delivery(self, order, email_channel):
        email_channel.configure(should_succeed=False, failure_reason="Mailbox full")
        assert not OrderConfirmationNotifier().notify_order_created(order, order.items, "jane@example.com")

    def test_never_raises_when_the_channel_does(self, order, email_channel):
        email_channel.configure(should_raise=True)
        assert not OrderConfirmationNotifier().notify_order_created(order, order.items, "jane@example.com")

    def test_explicit_channel_wins_over_registry(self, order, email_channel):
        private = FakeEmailAdapter()

        OrderConfirmationNotifier(channel=private).notify_order_created(order, order.items, "jane@example.com")

        assert len(private.sent_emails) == 1
        assert email_channel.sent_emails == []


def test_default_channel_is_the_fake_adapter(monkeypatch):
    monkeypatch.delenv("MAIL_TRANSPORT", raising=False)
    assert isinstance(get_email_channel(), FakeEmailAdapter)


def test_smtp_transport_is_selectable(monkeypatch):
    from notifications.channel.smtp_email import SmtpEmailAdapter

    monkeypatch.setenv("MAIL_TRANSPORT", "smtp")
    channel = get_email_channel()
    assert isinstance(channel, SmtpEmailAdapter)
    assert channel.port > 0
