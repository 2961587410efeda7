"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository, apply_environment
from .models import (
    AgentClass,
    DeliveryConfig,
    FeedFormat,
    FeedSource,
    GlobalConfig,
    MailConfig,
    RetryConfig,
    ScheduleConfig,
    TelegramConfig,
    UserAgents,
)

__all__ = [
    "AgentClass",
    "ConfigLocator",
    "ConfigRepository",
    "DeliveryConfig",
    "FeedFormat",
    "FeedSource",
    "GlobalConfig",
    "MailConfig",
    "RetryConfig",
    "ScheduleConfig",
    "TelegramConfig",
    "UserAgents",
    "apply_environment",
]
