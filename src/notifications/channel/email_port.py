"""Outbound mail boundary used for order confirmations."""

from abc import ABC, abstractmethod

SENT = "sent"
FAILED = "failed"


class EmailPort(ABC):
    """Adapters deliver one message per ``send`` call and report the outcome."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        """Deliver a message with a plain-text body and an optional HTML alternative.

        Returns:
            dict with keys: message_id, status (``SENT`` or ``FAILED``), error (on failure)
        """
        ...

    @staticmethod
    def delivered(result: dict | None) -> bool:
        return bool(result) and result.get("status") == SENT
