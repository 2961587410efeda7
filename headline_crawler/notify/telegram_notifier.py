"""Telegram Bot API delivery of the digest."""

from __future__ import annotations

from typing import Sequence

import httpx

from ..config import TelegramConfig
from ..engine import CanonicalArticle
from ..errors import DeliveryError
from .base import BaseNotifier
from .digest import build_telegram_messages


class TelegramNotifier(BaseNotifier):
    """Post the digest to a chat or channel through ``sendMessage``."""

    def __init__(self, config: TelegramConfig, transport: httpx.BaseTransport | None = None) -> None:
        if not config.configured:
            raise DeliveryError("telegram target requires TELEGRAM_BOT and TELEGRAM_CHANNEL")
        self.config = config
        self._client = httpx.Client(base_url=config.api_base, timeout=config.timeout, transport=transport)

    def send(self, articles: Sequence[CanonicalArticle], subject: str) -> None:
        for text in build_telegram_messages(articles, subject):
            self._send_message(text)

    def _send_message(self, text: str) -> None:
        token = self.config.bot_token.get_secret_value()
        payload = {
            "chat_id": self.config.channel,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        try:
            response = self._client.post(f"/bot{token}/sendMessage", json=payload)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"telegram delivery failed: {exc}") from exc
        if not response.is_success:
            raise DeliveryError(f"telegram API answered {response.status_code}: {response.text[:200]}")

    def close(self) -> None:
        self._client.close()


__all__ = ["TelegramNotifier"]
