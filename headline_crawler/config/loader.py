"""Configuration loading helpers for headline-crawler."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import SecretStr, ValidationError

from ..errors import ConfigError
from .models import FeedSource, GlobalConfig

GLOBAL_CONFIG_FILENAME = "global_config.yaml"
FEEDS_FILENAME = "feeds.yaml"
HOME_ENV = "HEADLINE_CRAWLER_HOME"
DELIVERY_TARGETS = ("email", "telegram", "file")


def _read_file(path: Path) -> object:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def _write_file(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


def apply_environment(config: GlobalConfig, environ: Mapping[str, str] | None = None) -> GlobalConfig:
    """Overlay delivery credentials and target from environment variables."""

    env = os.environ if environ is None else environ
    mail_update: dict[str, object] = {}
    if env.get("MAIN_EMAIL"):
        mail_update["address"] = env["MAIN_EMAIL"]
    if env.get("SMTP_HOST"):
        mail_update["smtp_host"] = env["SMTP_HOST"]
    if env.get("SMTP_PORT"):
        try:
            mail_update["smtp_port"] = int(env["SMTP_PORT"])
        except ValueError as exc:
            raise ConfigError(f"invalid SMTP_PORT: {env['SMTP_PORT']!r}") from exc
    if env.get("SMTP_PASS"):
        mail_update["smtp_password"] = SecretStr(env["SMTP_PASS"])
    telegram_update: dict[str, object] = {}
    if env.get("TELEGRAM_BOT"):
        telegram_update["bot_token"] = SecretStr(env["TELEGRAM_BOT"])
    if env.get("TELEGRAM_CHANNEL"):
        telegram_update["channel"] = env["TELEGRAM_CHANNEL"]

    update: dict[str, object] = {}
    if mail_update:
        update["mail"] = config.mail.model_copy(update=mail_update)
        if not config.contact_email and "address" in mail_update:
            update["contact_email"] = mail_update["address"]
    if telegram_update:
        update["telegram"] = config.telegram.model_copy(update=telegram_update)
    if env.get("TARGET"):
        target = env["TARGET"]
        if target not in DELIVERY_TARGETS:
            raise ConfigError(f"unsupported TARGET: {target!r}")
        update["delivery"] = config.delivery.model_copy(update={"target": target})
    return config.model_copy(update=update) if update else config


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    history_dir: Path | None = None
    outputs_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path(__file__).resolve().parents[2]).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.history_dir = (self.data_dir / "history").resolve()
        self.outputs_dir = (self.data_dir / "outputs").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.history_dir, self.outputs_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def global_config_path(self) -> Path:
        return self.data_dir / GLOBAL_CONFIG_FILENAME

    def feeds_path(self) -> Path:
        return self.data_dir / FEEDS_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._global_cache: GlobalConfig | None = None

    # ------------------------------------------------------------------
    # Global configuration helpers
    # ------------------------------------------------------------------
    def load_global_config(self) -> GlobalConfig:
        if self._global_cache is not None:
            return self._global_cache
        path = self.locator.global_config_path()
        if path.exists():
            payload = _read_file(path) or {}
            if not isinstance(payload, dict):
                raise ConfigError(f"Configuration file must contain a mapping: {path}")
            try:
                global_cfg = GlobalConfig.model_validate(payload)
            except ValidationError as exc:
                raise ConfigError(f"Invalid global configuration {path}: {exc}") from exc
        else:
            global_cfg = GlobalConfig()
            self.save_global_config(global_cfg)
        self._global_cache = global_cfg
        return global_cfg

    def save_global_config(self, config: GlobalConfig) -> None:
        path = self.locator.global_config_path()
        payload = config.model_dump(mode="json")
        # Never persist secrets; they come from the environment.
        payload["mail"]["smtp_password"] = ""
        payload["telegram"]["bot_token"] = ""
        _write_file(path, payload)
        self._global_cache = config

    # ------------------------------------------------------------------
    # Feed list helpers
    # ------------------------------------------------------------------
    def load_feeds(self) -> list[FeedSource]:
        """Return configured feeds in declaration order."""

        path = self.locator.feeds_path()
        if not path.exists():
            raise FileNotFoundError(f"Feed configuration not found: {path}")
        payload = _read_file(path)
        if isinstance(payload, dict):
            payload = payload.get("feeds")
        if not isinstance(payload, list):
            raise ConfigError(f"Feed configuration must contain a list of feeds: {path}")
        feeds: list[FeedSource] = []
        for index, entry in enumerate(payload):
            try:
                feeds.append(FeedSource.model_validate(entry))
            except ValidationError as exc:
                raise ConfigError(f"Invalid feed #{index} in {path}: {exc}") from exc
        return feeds

    def save_feeds(self, feeds: list[FeedSource]) -> Path:
        path = self.locator.feeds_path()
        _write_file(path, {"feeds": [feed.model_dump(mode="json") for feed in feeds]})
        return path


__all__ = ["ConfigLocator", "ConfigRepository", "apply_environment", "HOME_ENV"]
