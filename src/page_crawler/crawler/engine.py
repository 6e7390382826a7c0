"""Shared Playwright browser and the per-task render sessions it hands out."""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.config import CrawlerConfig
from ..core.errors import NavigationError, WaitTimeoutError
from .content import EXTRACT_CONTENT_SCRIPT, resolve_selectors, to_playwright_selector

logger = logging.getLogger(__name__)


def _first_line(exc: BaseException) -> str:
    # Playwright appends a multi-line call log to its messages.
    lines = str(exc).strip().splitlines()
    return lines[0] if lines else type(exc).__name__


class RenderSession(Protocol):
    """Per-task handle to a live page. Owned by exactly one task."""

    url: str

    async def open(self, url: str) -> None: ...

    async def wait_ready(self, selector: str, timeout_ms: float) -> None: ...

    async def extract_links(self) -> List[str]: ...

    async def extract_file_links(self, extension_pattern: str) -> List[str]: ...

    async def extract_content(
        self,
        selector: Optional[str] = None,
        ignore_selector: Optional[str] = None,
    ) -> str: ...

    async def title(self) -> str: ...

    async def close(self) -> None: ...


class FetchEngine(Protocol):
    """Shared resource that creates render sessions for the whole crawl."""

    async def open(self) -> None: ...

    async def new_session(self) -> RenderSession: ...

    async def close(self) -> None: ...


class PlaywrightSession:
    """Render session backed by a single Playwright page."""

    def __init__(self, page: Page, navigation_timeout: float = 30000) -> None:
        self._page = page
        self._navigation_timeout = navigation_timeout
        self.url = ""

    @property
    def page(self) -> Page:
        return self._page

    async def open(self, url: str) -> None:
        self.url = url
        try:
            await self._page.goto(
                url, wait_until="domcontentloaded", timeout=self._navigation_timeout
            )
        except PlaywrightError as exc:
            raise NavigationError(url, _first_line(exc)) from exc

    async def wait_ready(self, selector: str, timeout_ms: float) -> None:
        try:
            await self._page.wait_for_selector(
                to_playwright_selector(selector), state="attached", timeout=timeout_ms
            )
        except PlaywrightTimeoutError as exc:
            raise WaitTimeoutError(self.url, selector, timeout_ms) from exc

    async def extract_links(self) -> List[str]:
        html = await self._page.content()
        base = self._page.url or self.url
        soup = BeautifulSoup(html, "html.parser")
        return [urljoin(base, anchor["href"]) for anchor in soup.find_all("a", href=True)]

    async def extract_file_links(self, extension_pattern: str) -> List[str]:
        """Absolute URLs of anchors whose raw ``href`` matches ``extension_pattern``."""
        regex = re.compile(extension_pattern)
        html = await self._page.content()
        base = self._page.url or self.url
        soup = BeautifulSoup(html, "html.parser")
        return [
            urljoin(base, anchor["href"])
            for anchor in soup.find_all("a", href=True)
            if regex.search(anchor["href"])
        ]

    async def extract_content(
        self,
        selector: Optional[str] = None,
        ignore_selector: Optional[str] = None,
    ) -> str:
        root, ignored = resolve_selectors(selector, ignore_selector)
        text: Any = await self._page.evaluate(
            EXTRACT_CONTENT_SCRIPT, {"selector": root, "ignoreSelector": ignored}
        )
        return text or ""

    async def title(self) -> str:
        return await self._page.title()

    async def close(self) -> None:
        try:
            await self._page.close()
        except PlaywrightError:
            logger.debug("Page for %s was already closed", self.url, exc_info=True)


class PlaywrightEngine:
    """Owns one Chromium instance; opened lazily and released exactly once."""

    def __init__(self, *, headless: bool = True, navigation_timeout: float = 30000) -> None:
        self.headless = headless
        self.navigation_timeout = navigation_timeout
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._closed = False

    @classmethod
    def from_config(cls, config: CrawlerConfig) -> "PlaywrightEngine":
        return cls(headless=config.headless, navigation_timeout=config.navigation_timeout)

    @property
    def is_open(self) -> bool:
        return self._browser is not None and not self._closed

    async def open(self) -> None:
        if self._closed:
            raise RuntimeError("engine has already been released")
        if self._browser is not None:
            return
        logger.info("Launching Chromium (headless=%s)", self.headless)
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)

    async def new_session(self) -> PlaywrightSession:
        if not self.is_open or self._browser is None:
            raise RuntimeError("engine is not open")
        try:
            page = await self._browser.new_page()
        except PlaywrightError as exc:
            raise NavigationError("about:blank", f"could not open a new page: {_first_line(exc)}") from exc
        return PlaywrightSession(page, self.navigation_timeout)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.info("Closing Chromium")
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
