from __future__ import annotations

from headline_crawler.engine import CanonicalArticle, PublishedStore
from headline_crawler.infra import SQLiteManager


def _article(guid: str) -> CanonicalArticle:
    return CanonicalArticle(guid=guid, title=f"{guid} title", header="Wire", link=f"https://x.test/{guid}")


def test_mark_and_check(tmp_path) -> None:
    manager = SQLiteManager()
    store = PublishedStore(manager, tmp_path / "history" / "published.db")

    assert not store.is_published("Wire:1")
    inserted = store.mark_published([_article("Wire:1"), _article("Wire:2")])

    assert inserted == 2
    assert store.is_published("Wire:1")
    assert store.is_published("Wire:2")
    assert not store.is_published("Wire:3")
    manager.close_all()


def test_mark_is_idempotent(tmp_path) -> None:
    manager = SQLiteManager()
    store = PublishedStore(manager, tmp_path / "published.db")
    store.mark_published([_article("a")])

    assert store.mark_published([_article("a"), _article("b")]) == 1
    assert store.mark_published([]) == 0
    assert [row[0] for row in store.recent(10)] == ["b", "a"]
    manager.close_all()


def test_state_survives_reopen(tmp_path) -> None:
    path = tmp_path / "published.db"
    manager = SQLiteManager()
    PublishedStore(manager, path).mark_published([_article("kept")])
    manager.close_all()

    reopened = PublishedStore(SQLiteManager(), path)
    assert reopened.is_published("kept")


def test_reset_forgets_everything(tmp_path) -> None:
    manager = SQLiteManager()
    store = PublishedStore(manager, tmp_path / "published.db")
    store.mark_published([_article("gone")])

    store.reset()

    assert not store.is_published("gone")
    assert store.recent() == []
    manager.close_all()
