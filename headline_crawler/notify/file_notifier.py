"""File based delivery supporting JSONL and TXT digests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from ..engine import CanonicalArticle
from ..errors import DeliveryError
from .base import BaseNotifier


class FileNotifier(BaseNotifier):
    """Write each digest to ``<output_dir>/digest-<run_tag>.<ext>``."""

    def __init__(self, output_dir: Path, fmt: str = "json", run_tag: str | None = None) -> None:
        self.output_dir = output_dir
        self.format = fmt
        self.run_tag = run_tag
        self.last_path: Path | None = None

    @property
    def _extension(self) -> str:
        return "jsonl" if self.format == "json" else "txt"

    def send(self, articles: Sequence[CanonicalArticle], subject: str) -> None:
        run_tag = self.run_tag or datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        path = self.output_dir / f"digest-{run_tag}.{self._extension}"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as stream:
                if self.format == "json":
                    for article in articles:
                        record = {
                            "guid": article.guid,
                            "title": article.title,
                            "header": article.header,
                            "link": article.link,
                            "subject": subject,
                        }
                        json.dump(record, stream, ensure_ascii=False)
                        stream.write("\n")
                else:
                    stream.write(self._format_txt(articles, subject))
        except OSError as exc:
            raise DeliveryError(f"failed to write digest {path}: {exc}") from exc
        self.last_path = path

    @staticmethod
    def _format_txt(articles: Sequence[CanonicalArticle], subject: str) -> str:
        lines = [subject, ""]
        for index, article in enumerate(articles, start=1):
            label = f"{article.header}: " if article.header else ""
            lines.append(f"{index}. {label}{article.title}")
            lines.append(f"   {article.link}")
        return "\n".join(lines) + "\n"


__all__ = ["FileNotifier"]
