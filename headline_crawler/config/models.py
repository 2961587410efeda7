"""Pydantic models used across the headline-crawler configuration flow."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

# Header label that selects the legacy RDF dialect when no format is given.
LEGACY_RDF_HEADER = "Slashdot"
REDDIT_HEADER_PREFIX = "r/"


class FeedFormat(str, Enum):
    """Wire schema of a configured feed."""

    RSS = "rss"
    ATOM_REDDIT = "atom-reddit"
    SLASHDOT_RDF = "slashdot-rdf"


class AgentClass(str, Enum):
    """User-agent families a feed may request."""

    CHROME = "chrome"
    READER = "reader"
    BOT = "bot"


def infer_format(header: str) -> FeedFormat:
    """Derive the wire schema from a feed's header label."""

    if header == LEGACY_RDF_HEADER:
        return FeedFormat.SLASHDOT_RDF
    if header.startswith(REDDIT_HEADER_PREFIX):
        return FeedFormat.ATOM_REDDIT
    return FeedFormat.RSS


class FeedSource(BaseModel):
    """Static definition of one syndication feed."""

    model_config = ConfigDict(frozen=True)

    url: str
    format: FeedFormat
    header: str = ""
    agent: str = AgentClass.BOT.value
    enhanced_headers: bool = False

    @model_validator(mode="before")
    @classmethod
    def _default_format(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("format"):
            data = dict(data)
            data["format"] = infer_format(str(data.get("header") or ""))
        return data

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Feed url must be http(s): {value!r}")
        return value

    @field_validator("agent", mode="before")
    @classmethod
    def _normalise_agent(cls, value: Any) -> str:
        return str(value or "").strip().lower()


class UserAgents(BaseModel):
    """User-Agent templates; ``{homepage}`` and ``{contact}`` are substituted."""

    chrome: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36"
    )
    reader: str = "RSSReader/1.0 (+{homepage}; {contact})"
    bot: str = "headlines_bot/1.0 (+{homepage}; {contact})"


class RetryConfig(BaseModel):
    """Bounded retry for transport-level fetch failures."""

    max_attempts: int = 3
    base_delay: float = 0.5

    @model_validator(mode="after")
    def _validate_bounds(self) -> "RetryConfig":
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        return self


class MailConfig(BaseModel):
    """SMTPS settings; the same address is sender and recipient."""

    address: str = ""
    smtp_host: str = ""
    smtp_port: int = 465
    smtp_password: SecretStr = SecretStr("")
    timeout: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.address and self.smtp_host and self.smtp_password.get_secret_value())


class TelegramConfig(BaseModel):
    """Bot API settings; ``channel`` is a chat id or ``@channelname``."""

    bot_token: SecretStr = SecretStr("")
    channel: str = ""
    api_base: str = "https://api.telegram.org"
    timeout: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.bot_token.get_secret_value() and self.channel)


class DeliveryConfig(BaseModel):
    """How the digest leaves the process."""

    target: Literal["email", "telegram", "file"] = "file"
    max_attempts: int = 2
    backoff_seconds: float = 1.0
    file_format: Literal["json", "txt"] = "json"

    @field_validator("max_attempts")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_attempts must be >= 1")
        return value


class ScheduleConfig(BaseModel):
    """Hours of the day during which gated targets may run."""

    timezone: str = "Europe/Madrid"
    hours: list[int] = Field(default_factory=lambda: [9, 19])
    gated_targets: list[str] = Field(default_factory=lambda: ["email"])

    @field_validator("hours")
    @classmethod
    def _validate_hours(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("at least one hour is required")
        for hour in value:
            if not 0 <= hour <= 23:
                raise ValueError(f"hour out of range: {hour}")
        return sorted(set(value))


class GlobalConfig(BaseModel):
    """Global controls shared across feeds."""

    contact_email: str = ""
    homepage: str = "https://github.com/headline-crawler"
    user_agents: UserAgents = Field(default_factory=UserAgents)
    request_timeout: float = 40.0
    retry: RetryConfig = Field(default_factory=RetryConfig)
    delivery: DeliveryConfig = Field(default_factory=DeliveryConfig)
    mail: MailConfig = Field(default_factory=MailConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    history_path: Path = Field(default=Path("data/history/published.db"))
    outputs_dir: Path = Field(default=Path("data/outputs"))

    @field_validator("history_path", "outputs_dir", mode="before")
    @classmethod
    def _coerce_paths(cls, value: Any) -> Path:
        return Path(value)

    def resolved_history_path(self, base_dir: Path) -> Path:
        """Return the published-store path relative to the project root."""

        if not self.history_path.is_absolute():
            return (base_dir / self.history_path).resolve()
        return self.history_path

    def resolved_outputs_dir(self, base_dir: Path) -> Path:
        if not self.outputs_dir.is_absolute():
            return (base_dir / self.outputs_dir).resolve()
        return self.outputs_dir


__all__ = [
    "AgentClass",
    "DeliveryConfig",
    "FeedFormat",
    "FeedSource",
    "GlobalConfig",
    "LEGACY_RDF_HEADER",
    "MailConfig",
    "RetryConfig",
    "ScheduleConfig",
    "TelegramConfig",
    "UserAgents",
    "infer_format",
]
