"""Notification sink interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..engine import CanonicalArticle


class BaseNotifier(ABC):
    """Uniform delivery contract; transports only see ordered articles and a subject."""

    @abstractmethod
    def send(self, articles: Sequence[CanonicalArticle], subject: str) -> None:
        """Deliver one digest. Raise ``DeliveryError`` on failure."""

    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseNotifier"]
