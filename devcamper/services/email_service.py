"""Service for sending emails."""

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from ..domain.errors import DeliveryFailed
from ..domain.ports.notifications import EmailMessage

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending plain-text emails via SMTP."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "DevCamper",
        timeout: float = 10.0,
    ):
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_email = from_email or ""
        self.from_name = from_name
        self.timeout = timeout
        self.enabled = bool(self.smtp_host and self.from_email)

    def send(self, message: EmailMessage) -> None:
        """
        Send an email.

        Without SMTP settings the message is logged instead of delivered.

        Raises:
            DeliveryFailed: If the SMTP exchange fails
        """
        if not self.enabled:
            logger.info("[EMAIL] %s -> %s\n%s", message.subject, message.to, message.body)
            return

        msg = MIMEText(message.body, "plain", "utf-8")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = message.to

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", message.to, exc)
            raise DeliveryFailed() from exc
