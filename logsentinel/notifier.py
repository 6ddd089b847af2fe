"""
Alert notifications.

SmtpNotifier sends plain-text mail over SMTP/SSL. LogNotifier only logs
what it would send; it is used when no mail credentials are configured,
the same way the dry-run mode only logs the action it would take.

Delivery problems never propagate: notify() returns False instead.
"""

import smtplib
from email.message import EmailMessage
from typing import Optional

from . import config
from . import logger


class SmtpNotifier:
    """Send alert mail through an SMTP server over SSL."""

    def __init__(
        self,
        host: str = None,
        port: int = None,
        username: str = None,
        password: str = None,
        sender_name: str = None,
        timeout: float = None,
    ):
        self.host = host or config.SMTP_HOST
        self.port = port or config.SMTP_PORT
        self.username = username if username is not None else config.EMAIL_USER
        self.password = password if password is not None else config.EMAIL_PASS
        self.sender_name = sender_name or config.EMAIL_SENDER_NAME
        self.timeout = timeout or config.SMTP_TIMEOUT_SECONDS

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = f'"{self.sender_name}" <{self.username}>'
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def notify(self, recipient: str, subject: str, body: str) -> bool:
        """Returns True if the server accepted the message."""
        msg = self.build_message(recipient, subject, body)
        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.log_error(
                "Email sending failed",
                recipient=recipient,
                host=self.host,
                error=str(e),
            )
            return False
        logger.log_info("Email alert sent", recipient=recipient, subject=subject)
        return True


class LogNotifier:
    """Log notifications instead of sending them."""

    def notify(self, recipient: str, subject: str, body: str) -> bool:
        logger.log_info(
            "[DRY-RUN] Would send email alert",
            recipient=recipient,
            subject=subject,
            body=body,
        )
        return True


def build_notifier(dry_run: Optional[bool] = None):
    """SmtpNotifier when credentials are configured, otherwise LogNotifier."""
    if dry_run is None:
        dry_run = not (config.EMAIL_USER and config.EMAIL_PASS)
    if dry_run:
        return LogNotifier()
    return SmtpNotifier()
