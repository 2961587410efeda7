from __future__ import annotations

import itertools
import threading

import httpx
import pytest

from headline_crawler.config import GlobalConfig
from headline_crawler.engine import Fetcher
from headline_crawler.engine.fetcher import NAVIGATION_HEADERS
from headline_crawler.errors import FetchCancelledError, FetchStatusError, FetchTransportError


def _fetcher(handler, **config) -> Fetcher:
    global_config = GlobalConfig(contact_email="ops@example.test", homepage="https://home.test", **config)
    return Fetcher(global_config, transport=httpx.MockTransport(handler))


def test_success_returns_body_and_headers(sample_feed) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"<rss/>")

    with _fetcher(handler) as fetcher:
        result = fetcher.fetch(sample_feed(agent="reader"))

    assert result.body == b"<rss/>"
    assert result.status_code == 200
    assert result.url == "https://news.example.test/rss"
    (request,) = seen
    assert request.headers["User-Agent"] == "RSSReader/1.0 (+https://home.test; ops@example.test)"
    assert "Sec-Fetch-Mode" not in request.headers


@pytest.mark.parametrize(
    ("agent", "prefix"),
    [("chrome", "Mozilla/5.0"), ("bot", "headlines_bot/1.0"), ("", "headlines_bot/1.0"), ("mystery", "headlines_bot/1.0")],
)
def test_agent_selection(sample_feed, agent: str, prefix: str) -> None:
    with _fetcher(lambda request: httpx.Response(200)) as fetcher:
        headers = fetcher.build_headers(sample_feed(agent=agent))
    assert headers["User-Agent"].startswith(prefix)


def test_enhanced_headers_add_navigation_hints(sample_feed) -> None:
    with _fetcher(lambda request: httpx.Response(200)) as fetcher:
        headers = fetcher.build_headers(sample_feed(enhanced_headers=True))
    for name, value in NAVIGATION_HEADERS.items():
        assert headers[name] == value


def test_transport_errors_retry_with_backoff(sample_feed, monkeypatch) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, content=b"ok")

    delays: list[float] = []
    fetcher = _fetcher(handler)
    monkeypatch.setattr(fetcher, "_wait", lambda event, delay: delays.append(delay) or False)

    result = fetcher.fetch(sample_feed())

    assert result.body == b"ok"
    assert calls["count"] == 3
    assert delays == [0.5, 1.0]
    fetcher.close()


def test_transport_errors_exhaust_budget(sample_feed, monkeypatch) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = _fetcher(handler)
    monkeypatch.setattr(fetcher, "_wait", lambda event, delay: False)

    with pytest.raises(FetchTransportError) as excinfo:
        fetcher.fetch(sample_feed())

    assert calls["count"] == 3
    assert excinfo.value.attempts == 3
    assert "failed to make request after 3 attempts" in str(excinfo.value)
    fetcher.close()


@pytest.mark.parametrize("status", [301, 404, 500, 503])
def test_non_success_status_is_not_retried(sample_feed, monkeypatch, status: int) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(status)

    fetcher = _fetcher(handler)
    monkeypatch.setattr(fetcher, "_wait", lambda event, delay: pytest.fail("must not back off"))

    with pytest.raises(FetchStatusError) as excinfo:
        fetcher.fetch(sample_feed())

    assert calls["count"] == 1
    assert excinfo.value.status_code == status
    fetcher.close()


def test_redirects_are_followed(sample_feed) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/rss":
            return httpx.Response(302, headers={"Location": "https://news.example.test/feed.xml"})
        return httpx.Response(200, content=b"moved")

    with _fetcher(handler) as fetcher:
        result = fetcher.fetch(sample_feed())
    assert result.body == b"moved"
    assert result.url == "https://news.example.test/feed.xml"


def test_cancelled_before_request(sample_feed) -> None:
    event = threading.Event()
    event.set()
    with _fetcher(lambda request: pytest.fail("must not send")) as fetcher:
        with pytest.raises(FetchCancelledError):
            fetcher.fetch(sample_feed(), event)


def test_cancelled_during_backoff(sample_feed, monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    fetcher = _fetcher(handler)
    monkeypatch.setattr(fetcher, "_wait", lambda event, delay: True)
    with pytest.raises(FetchCancelledError):
        fetcher.fetch(sample_feed(), threading.Event())
    fetcher.close()


def test_total_deadline_covers_slow_bodies(sample_feed, monkeypatch) -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(200, content=iter([b"<rss>", b"<channel/>", b"</rss>"]))

    # Every clock read advances 25s; the second chunk lands past the 40s deadline.
    ticks = itertools.count(0, 25)
    fetcher = _fetcher(handler)
    monkeypatch.setattr(fetcher, "_clock", lambda: float(next(ticks)))
    monkeypatch.setattr(fetcher, "_wait", lambda event, delay: False)

    with pytest.raises(FetchTransportError):
        fetcher.fetch(sample_feed())

    assert calls["count"] == 3
    fetcher.close()


def test_body_within_deadline_is_returned(sample_feed, monkeypatch) -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, content=iter([b"<rss>", b"</rss>"])))
    monkeypatch.setattr(fetcher, "_clock", lambda: 0.0)

    assert fetcher.fetch(sample_feed()).body == b"<rss></rss>"
    fetcher.close()
