"""SMTPS delivery of the HTML digest."""

from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage
from typing import Sequence

from ..config import MailConfig
from ..engine import CanonicalArticle
from ..errors import DeliveryError
from .base import BaseNotifier
from .digest import build_digest_html


class EmailNotifier(BaseNotifier):
    """Send the digest to the configured address over implicit TLS."""

    def __init__(self, config: MailConfig) -> None:
        if not config.configured:
            raise DeliveryError("email target requires MAIN_EMAIL, SMTP_HOST and SMTP_PASS")
        self.config = config

    def build_message(self, articles: Sequence[CanonicalArticle], subject: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.address
        message["To"] = self.config.address
        message["Subject"] = subject
        message.set_content(build_digest_html(articles, subject), subtype="html", charset="utf-8")
        return message

    def send(self, articles: Sequence[CanonicalArticle], subject: str) -> None:
        message = self.build_message(articles, subject)
        try:
            with smtplib.SMTP_SSL(
                self.config.smtp_host,
                self.config.smtp_port,
                timeout=self.config.timeout,
                context=ssl.create_default_context(),
            ) as client:
                client.login(self.config.address, self.config.smtp_password.get_secret_value())
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"smtp delivery failed: {exc}") from exc


__all__ = ["EmailNotifier"]
