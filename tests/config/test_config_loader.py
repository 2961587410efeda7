from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from headline_crawler.config import ConfigLocator, ConfigRepository, FeedFormat, GlobalConfig, apply_environment
from headline_crawler.errors import ConfigError


def test_locator_uses_env_and_creates_directories(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "home"
    monkeypatch.setenv("HEADLINE_CRAWLER_HOME", str(home))
    locator = ConfigLocator()

    assert locator.project_root == home.resolve()
    assert locator.global_config_path() == home.resolve() / "data" / "global_config.yaml"
    assert locator.feeds_path() == home.resolve() / "data" / "feeds.yaml"
    for path in (locator.history_dir, locator.outputs_dir, locator.logs_dir):
        assert path.exists()


def test_first_load_writes_defaults(temp_config_repository: ConfigRepository) -> None:
    config = temp_config_repository.load_global_config()

    assert config == GlobalConfig()
    assert temp_config_repository.locator.global_config_path().exists()


def test_global_roundtrip_never_persists_password(tmp_path: Path) -> None:
    repo = ConfigRepository(ConfigLocator(project_root=tmp_path))
    config = apply_environment(
        GlobalConfig(request_timeout=12.5), {"SMTP_PASS": "hunter2", "TELEGRAM_BOT": "123:abc"}
    )
    repo.save_global_config(config)

    stored = yaml.safe_load(repo.locator.global_config_path().read_text(encoding="utf-8"))
    assert stored["mail"]["smtp_password"] == ""
    assert stored["telegram"]["bot_token"] == ""
    assert stored["request_timeout"] == 12.5
    assert ConfigRepository(repo.locator).load_global_config().request_timeout == 12.5


def test_invalid_global_config(temp_config_repository: ConfigRepository) -> None:
    temp_config_repository.locator.global_config_path().write_text("retry:\n  max_attempts: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        temp_config_repository.load_global_config()


def test_feeds_keep_declaration_order(temp_config_repository: ConfigRepository) -> None:
    temp_config_repository.locator.feeds_path().write_text(
        "feeds:\n"
        "  - url: https://rss.slashdot.org/Slashdot/slashdotMain\n"
        "    header: Slashdot\n"
        "  - url: https://www.reddit.com/r/python/.rss\n"
        "    header: r/python\n"
        "    agent: Chrome\n"
        "    enhanced_headers: true\n"
        "  - url: https://news.example.test/rss\n"
        "    format: rss\n",
        encoding="utf-8",
    )

    feeds = temp_config_repository.load_feeds()

    assert [feed.format for feed in feeds] == [FeedFormat.SLASHDOT_RDF, FeedFormat.ATOM_REDDIT, FeedFormat.RSS]
    assert feeds[1].agent == "chrome"
    assert feeds[1].enhanced_headers
    assert feeds[2].header == ""


def test_feeds_accept_plain_list(temp_config_repository: ConfigRepository, sample_feed) -> None:
    path = temp_config_repository.save_feeds([sample_feed()])
    payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    path.write_text(yaml.safe_dump(payload["feeds"]), encoding="utf-8")

    assert temp_config_repository.load_feeds() == [sample_feed()]


def test_missing_feeds_file(temp_config_repository: ConfigRepository) -> None:
    with pytest.raises(FileNotFoundError):
        temp_config_repository.load_feeds()


@pytest.mark.parametrize(
    "content",
    ["feeds: nope\n", "- url: ftp://example.test/rss\n", "- header: no url\n"],
)
def test_invalid_feeds(temp_config_repository: ConfigRepository, content: str) -> None:
    temp_config_repository.locator.feeds_path().write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        temp_config_repository.load_feeds()


def test_environment_overlay() -> None:
    config = apply_environment(
        GlobalConfig(),
        {
            "MAIN_EMAIL": "me@example.test",
            "SMTP_HOST": "smtp.example.test",
            "SMTP_PORT": "2465",
            "SMTP_PASS": "hunter2",
            "TARGET": "email",
        },
    )

    assert config.mail.configured
    assert config.mail.smtp_port == 2465
    assert config.mail.smtp_password.get_secret_value() == "hunter2"
    assert config.delivery.target == "email"
    assert config.contact_email == "me@example.test"


def test_environment_overlay_is_noop_when_empty() -> None:
    config = GlobalConfig()
    assert apply_environment(config, {}) is config


@pytest.mark.parametrize("env", [{"SMTP_PORT": "smtps"}, {"TARGET": "pigeon"}])
def test_environment_overlay_rejects_bad_values(env: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        apply_environment(GlobalConfig(), env)


def test_environment_overlay_for_telegram() -> None:
    config = apply_environment(
        GlobalConfig(),
        {"TELEGRAM_BOT": "123:abc", "TELEGRAM_CHANNEL": "@headlines", "TARGET": "telegram"},
    )

    assert config.telegram.configured
    assert config.telegram.bot_token.get_secret_value() == "123:abc"
    assert config.telegram.channel == "@headlines"
    assert config.delivery.target == "telegram"
    assert not config.mail.configured
