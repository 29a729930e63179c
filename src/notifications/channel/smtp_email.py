"""SMTP email adapter, e.g. for a local MailHog instance in development."""

import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import structlog

from notifications.channel.email_port import FAILED, SENT, EmailPort

logger = structlog.get_logger(__name__)


class SmtpEmailAdapter(EmailPort):
    def __init__(self, host: str, port: int, sender: str, sender_name: str = "", timeout: float = 10.0):
        self.host = host
        self.port = port
        self.sender = sender
        self.sender_name = sender_name
        self.timeout = timeout

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        message = EmailMessage()
        message["From"] = formataddr((self.sender_name, self.sender)) if self.sender_name else self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.send_message(message)
        except (OSError, smtplib.SMTPException) as exc:
            logger.error("Failed to send email", to=to, host=self.host, port=self.port, error=str(exc))
            return {"message_id": None, "status": FAILED, "error": str(exc)}

        return {"message_id": message["Message-ID"], "status": SENT}
