"""Bounded exponential backoff for transport failures."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import RetryConfig


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """``max_attempts`` tries in total, waiting ``base_delay * 2**(n-1)`` after try ``n``."""

    max_attempts: int = 3
    base_delay: float = 0.5

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(max_attempts=config.max_attempts, base_delay=config.base_delay)

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))


__all__ = ["RetryPolicy"]
