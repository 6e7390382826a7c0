"""In-memory stand-ins for the Playwright engine, driven by a dict link graph."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from page_crawler.core.errors import NavigationError, WaitTimeoutError  # type: ignore[import]


@dataclass
class FakePage:
    title: str = ""
    links: List[str] = field(default_factory=list)
    content: str = ""
    ready_selectors: frozenset[str] = frozenset()
    delay: float = 0.0


class FakeSession:
    def __init__(self, engine: "FakeEngine") -> None:
        self._engine = engine
        self._page: Optional[FakePage] = None
        self.url = ""
        self.closed = False

    async def open(self, url: str) -> None:
        self.url = url
        self._engine.visits.append(url)
        if url in self._engine.open_errors:
            raise self._engine.open_errors[url]
        page = self._engine.pages.get(url)
        await asyncio.sleep(page.delay if page else 0)
        if page is None:
            raise NavigationError(url, "net::ERR_NAME_NOT_RESOLVED")
        self._page = page

    async def wait_ready(self, selector: str, timeout_ms: float) -> None:
        await asyncio.sleep(0)
        assert self._page is not None
        if selector not in self._page.ready_selectors:
            raise WaitTimeoutError(self.url, selector, timeout_ms)

    async def extract_links(self) -> List[str]:
        await asyncio.sleep(0)
        assert self._page is not None
        return list(self._page.links)

    async def extract_file_links(self, extension_pattern: str) -> List[str]:
        await asyncio.sleep(0)
        assert self._page is not None
        return [link for link in self._page.links if re.search(extension_pattern, link)]

    async def extract_content(self, selector=None, ignore_selector=None) -> str:
        await asyncio.sleep(0)
        assert self._page is not None
        self._engine.content_calls.append((self.url, selector, ignore_selector))
        return self._page.content

    async def title(self) -> str:
        assert self._page is not None
        return self._page.title

    async def close(self) -> None:
        assert not self.closed, "session closed twice"
        self.closed = True
        self._engine.active_sessions -= 1
        if self.url in self._engine.close_errors:
            raise self._engine.close_errors[self.url]


class FakeEngine:
    def __init__(self, pages: Dict[str, FakePage]) -> None:
        self.pages = pages
        self.open_errors: Dict[str, Exception] = {}
        self.close_errors: Dict[str, Exception] = {}
        self.open_calls = 0
        self.close_calls = 0
        self.active_sessions = 0
        self.peak_sessions = 0
        self.sessions: List[FakeSession] = []
        self.visits: List[str] = []
        self.content_calls: list[tuple] = []

    async def open(self) -> None:
        self.open_calls += 1

    async def new_session(self) -> FakeSession:
        if self.close_calls:
            raise RuntimeError("engine used after release")
        session = FakeSession(self)
        self.sessions.append(session)
        self.active_sessions += 1
        self.peak_sessions = max(self.peak_sessions, self.active_sessions)
        return session

    async def close(self) -> None:
        assert self.active_sessions == 0, "engine released while sessions are open"
        self.close_calls += 1


def chain_graph(count: int, base: str = "https://ex.com") -> Dict[str, FakePage]:
    """Page 0 links to every other page; the others link back to page 0."""

    urls = [f"{base}/p{index}" for index in range(count)]
    pages = {urls[0]: FakePage(title="p0", links=urls[1:], content="root")}
    for index, url in enumerate(urls[1:], start=1):
        pages[url] = FakePage(
            title=f"p{index}",
            links=[urls[0], urls[(index % (count - 1)) + 1]],
            content=f"page {index}",
            delay=0.001 * (index % 3),
        )
    return pages
