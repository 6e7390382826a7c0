"""Result containers produced by a crawl run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import CrawlError
from .models import PageRecord


@dataclass(frozen=True)
class CrawlFailure:
    """A URL that was dispatched but produced no page record."""

    url: str
    kind: str
    message: str

    @classmethod
    def from_error(cls, url: str, error: CrawlError) -> "CrawlFailure":
        return cls(url=url, kind=error.kind, message=error.message)


@dataclass
class CrawlReport:
    """Structured data produced by a single crawl."""

    seed_urls: List[str] = field(default_factory=list)
    pages: List[PageRecord] = field(default_factory=list)
    failures: List[CrawlFailure] = field(default_factory=list)
    dispatched: int = 0

    @property
    def fetched_urls(self) -> List[str]:
        return [page["url"] for page in self.pages]

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed_urls": list(self.seed_urls),
            "data": [dict(page) for page in self.pages],
            "failures": [
                {"url": item.url, "kind": item.kind, "message": item.message}
                for item in self.failures
            ],
            "dispatched": self.dispatched,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4, ensure_ascii=False)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "CrawlReport":
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            seed_urls=list(raw.get("seed_urls", [])),
            pages=[
                PageRecord(url=item["url"], title=item["title"], content=item["content"])
                for item in raw.get("data", [])
            ],
            failures=[CrawlFailure(**item) for item in raw.get("failures", [])],
            dispatched=int(raw.get("dispatched", 0)),
        )
