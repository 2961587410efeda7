"""Published-article store backing the dedup gate and publish recorder."""

from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import Iterable, Protocol

from ..infra.storage import SQLiteManager
from .records import CanonicalArticle


class PublishedCheck(Protocol):
    """Dedup gate consulted once per candidate article."""

    def __call__(self, guid: str) -> bool: ...


class PublishedStore:
    """SQLite record of every GUID already delivered."""

    def __init__(self, manager: SQLiteManager, db_path: Path) -> None:
        self.manager = manager
        self.db_path = db_path
        self._lock = Lock()
        self._conn = self.manager.connect(db_path)

    def is_published(self, guid: str) -> bool:
        with self._lock:
            cur = self._conn.execute("SELECT 1 FROM published_articles WHERE guid = ?", (guid,))
            return cur.fetchone() is not None

    def mark_published(self, articles: Iterable[CanonicalArticle]) -> int:
        """Record ``articles`` in one transaction; already-known GUIDs are ignored."""

        rows = [(a.guid, a.title, a.header, a.link) for a in articles]
        if not rows:
            return 0
        with self._lock:
            with self._conn:
                cur = self._conn.executemany(
                    "INSERT OR IGNORE INTO published_articles(guid, title, header, link, published_at) "
                    "VALUES (?, ?, ?, ?, datetime('now'))",
                    rows,
                )
        return cur.rowcount

    def recent(self, limit: int = 20) -> list[tuple[str, str, str]]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT guid, title, published_at FROM published_articles "
                "ORDER BY published_at DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [(row["guid"], row["title"], row["published_at"]) for row in rows]

    def reset(self) -> None:
        with self._lock:
            self.manager.reset(self.db_path)
            self._conn = self.manager.connect(self.db_path)


__all__ = ["PublishedCheck", "PublishedStore"]
