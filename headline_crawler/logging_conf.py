"""structlog events rendered as JSON lines by python-json-logger."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from typing import Iterable

import structlog

LOGGER_NAME = "headline_crawler"
_JSON_FORMAT = {
    "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
}
_configured = False


def _default_log_dir() -> Path:
    env_root = os.environ.get("HEADLINE_CRAWLER_HOME")
    if env_root:
        return Path(env_root).expanduser().resolve() / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def _slugify(name: str) -> str:
    return "".join(ch.lower() if ch.isalnum() else "-" for ch in name).strip("-") or "feed"


def configure_logging(verbose: bool = False) -> structlog.stdlib.BoundLogger:
    """Route the package logger to stderr, ``crawler.log`` and ``error.log``."""

    global _configured
    log_dir = _default_log_dir()
    (log_dir / "feeds").mkdir(parents=True, exist_ok=True)
    if not _configured:
        level = "DEBUG" if verbose else "INFO"
        handlers = {"console": {"class": "logging.StreamHandler", "level": level, "formatter": "json"}}
        for name, file_level in (("crawler", "INFO"), ("error", "ERROR")):
            handlers[name] = {
                "class": "logging.FileHandler",
                "level": file_level,
                "filename": str(log_dir / f"{name}.log"),
                "formatter": "json",
            }
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {"json": _JSON_FORMAT},
                "handlers": handlers,
                "loggers": {LOGGER_NAME: {"handlers": list(handlers), "level": level, "propagate": False}},
            }
        )
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.processors.format_exc_info,
                structlog.stdlib.render_to_log_kwargs,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        _configured = True
    return structlog.get_logger(LOGGER_NAME)


def feed_logger(header: str, verbose: bool = False) -> structlog.stdlib.BoundLogger:
    """Logger bound to one feed, mirrored into ``logs/feeds/<slug>.log``."""

    configure_logging(verbose)
    slug = _slugify(header)
    path = _default_log_dir() / "feeds" / f"{slug}.log"
    name = f"{LOGGER_NAME}.feed.{slug}"
    py_logger = logging.getLogger(name)
    if not any(getattr(handler, "baseFilename", None) == str(path) for handler in py_logger.handlers):
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.getLogger(LOGGER_NAME).handlers[0].formatter)
        py_logger.addHandler(handler)
    return structlog.get_logger(name).bind(feed=header)


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        return stream.readlines()[-line_count:]


def available_logs() -> Iterable[Path]:
    log_dir = _default_log_dir()
    if not log_dir.exists():
        return []
    return sorted(list(log_dir.glob("*.log")) + list((log_dir / "feeds").glob("*.log")))


__all__ = ["configure_logging", "feed_logger", "tail_log", "available_logs", "LOGGER_NAME"]
