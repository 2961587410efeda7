"""Notification sinks and digest formatting."""

from .base import BaseNotifier
from .digest import build_digest_html, build_subject, build_telegram_messages, format_digest_item
from .email_notifier import EmailNotifier
from .file_notifier import FileNotifier
from .telegram_notifier import TelegramNotifier

__all__ = [
    "BaseNotifier",
    "EmailNotifier",
    "FileNotifier",
    "TelegramNotifier",
    "build_digest_html",
    "build_subject",
    "build_telegram_messages",
    "format_digest_item",
]
