"""Pytest configuration providing shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

import pytest
import structlog

from headline_crawler.config import (
    ConfigLocator,
    ConfigRepository,
    FeedSource,
    GlobalConfig,
    RetryConfig,
)

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEADLINE_CRAWLER_HOME", str(tmp_path))


@pytest.fixture
def fixture_bytes() -> Callable[[str], bytes]:
    def _read(name: str) -> bytes:
        return (FIXTURES / name).read_bytes()

    return _read


@pytest.fixture
def sample_global_config(tmp_path: Path) -> GlobalConfig:
    return GlobalConfig(
        contact_email="ops@example.test",
        retry=RetryConfig(max_attempts=3, base_delay=0.0),
        history_path=tmp_path / "history" / "published.db",
        outputs_dir=tmp_path / "outputs",
    )


@pytest.fixture
def sample_feed() -> Callable[..., FeedSource]:
    def _builder(**overrides: Any) -> FeedSource:
        base: dict[str, Any] = {
            "url": "https://news.example.test/rss",
            "header": "Example News",
            "agent": "reader",
        }
        base.update(overrides)
        return FeedSource(**base)

    return _builder


@pytest.fixture
def test_logger() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger("headline_crawler.tests")


@pytest.fixture
def temp_config_repository(tmp_path: Path) -> Iterable[ConfigRepository]:
    locator = ConfigLocator(project_root=tmp_path)
    yield ConfigRepository(locator)
