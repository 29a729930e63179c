"""Order confirmation notifier: the checkout's best-effort email collaborator."""

import structlog

from notifications.channel import get_email_channel
from notifications.channel.email_port import EmailPort
from notifications.templates.order_confirmation import OrderConfirmationTemplate
from shared.config import get_settings

logger = structlog.get_logger(__name__)


def build_context(order, items) -> dict:
    settings = get_settings()
    return {
        "order_id": order.id,
        "customer_name": order.customer_name,
        "created_at": order.created_at.strftime("%Y-%m-%d %H:%M:%S") if order.created_at else "",
        "status": order.status,
        "address": order.address,
        "phone": order.phone,
        "total_cents": order.total_cents,
        "items": [
            {"name": item.product_name, "quantity": item.quantity, "price_cents": item.price_cents} for item in items
        ],
        "app_name": settings.app_name,
        "currency_symbol": settings.currency_symbol,
    }


class OrderConfirmationNotifier:
    def __init__(self, channel: EmailPort | None = None):
        self._channel = channel

    @property
    def channel(self) -> EmailPort:
        return self._channel or get_email_channel()

    def notify_order_created(self, order, items, recipient_address: str) -> bool:
        """Email the order confirmation.

        Returns True when the channel accepted the message. Delivery problems
        are logged and reported as False, never raised.
        """
        content = OrderConfirmationTemplate.render(build_context(order, items))

        try:
            result = self.channel.send(
                to=recipient_address,
                subject=content["subject"],
                body=content["body"],
                html_body=content["html_body"],
            )
        except Exception as e:
            logger.error("Order confirmation dispatch failed", order_id=order.id, error=str(e))
            return False

        if not EmailPort.delivered(result):
            logger.warning(
                "Order confirmation not delivered",
                order_id=order.id,
                error=result.get("error", "Unknown dispatch error"),
            )
            return False

        logger.info("Order confirmation sent", order_id=order.id, message_id=result.get("message_id"))
        return True
