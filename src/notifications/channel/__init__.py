"""Email channel registry.

Uses the fake adapter by default; set ``MAIL_TRANSPORT=smtp`` to deliver
through the SMTP server named by ``MAIL_HOST``/``MAIL_PORT``.
"""

import os

from notifications.channel.email_port import EmailPort

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        if os.getenv("MAIL_TRANSPORT", "fake").lower() == "smtp":
            from notifications.channel.smtp_email import SmtpEmailAdapter
            from shared.config import get_settings

            settings = get_settings()
            _email_channel = SmtpEmailAdapter(
                host=settings.mail_host,
                port=settings.mail_port,
                sender=settings.mail_from,
                sender_name=settings.mail_from_name,
            )
        else:
            from notifications.channel.fake_email import FakeEmailAdapter

            _email_channel = FakeEmailAdapter()

    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    """Override the active email adapter (useful for tests)."""
    global _email_channel
    _email_channel = channel


def reset_channels():
    """Reset channel singletons (useful for testing)."""
    global _email_channel
    _email_channel = None
