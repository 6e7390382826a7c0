"""Entry point for executing a crawl and collecting page records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.config import CrawlerConfig
from ..core.models import PageRecord
from ..core.report import CrawlReport
from .engine import FetchEngine, PlaywrightEngine, RenderSession
from .scheduler import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_URLS_TO_CRAWL,
    Crawler,
    PushCallback,
    RequestHandler,
)
from .urls import Patterns, as_patterns, filter_links

logger = logging.getLogger(__name__)

DEFAULT_WAIT_FOR_SELECTOR_TIMEOUT = 1000


@dataclass(slots=True)
class CrawlOptions:
    """Parameters accepted by :func:`crawl` and the adapters built on it."""

    urls: Sequence[str]
    match: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    selector: Optional[str] = None
    ignore_selector: Optional[str] = None
    wait_for_selector_timeout: float = DEFAULT_WAIT_FOR_SELECTOR_TIMEOUT
    max_urls_to_crawl: int = DEFAULT_MAX_URLS_TO_CRAWL
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    def __post_init__(self) -> None:
        self.urls = [url.strip() for url in self.urls if url and url.strip()]
        self.match = as_patterns(self.match)
        self.exclude = as_patterns(self.exclude)


def build_request_handler(options: CrawlOptions, dataset: List[PageRecord]) -> RequestHandler:
    """Handler that waits for readiness, pushes matching links and records the page."""

    async def handle(session: RenderSession, url: str, push: PushCallback) -> None:
        if options.selector:
            await session.wait_ready(options.selector, options.wait_for_selector_timeout)

        links = await session.extract_links()
        accepted = filter_links(links, options.match, options.exclude)
        added = push(accepted)
        logger.debug("%s: %d links, %d matched, %d new", url, len(links), len(accepted), added)

        title = await session.title()
        content = await session.extract_content(options.selector, options.ignore_selector)
        dataset.append(PageRecord(url=url, title=title, content=content))

    return handle


async def run_crawl(
    options: CrawlOptions,
    *,
    config: Optional[CrawlerConfig] = None,
    engine: Optional[FetchEngine] = None,
) -> CrawlReport:
    """Crawl and return every page record together with the per-URL failures."""

    if engine is None:
        engine = PlaywrightEngine.from_config(config) if config else PlaywrightEngine()

    dataset: List[PageRecord] = []
    crawler = Crawler(
        build_request_handler(options, dataset),
        max_urls_to_crawl=options.max_urls_to_crawl,
        max_concurrency=options.max_concurrency,
        engine=engine,
    )
    state = await crawler.start(options.urls)

    return CrawlReport(
        seed_urls=list(options.urls),
        pages=dataset,
        failures=list(state.failures),
        dispatched=len(state.dispatch_order),
    )


async def crawl(
    urls: Sequence[str],
    match: Patterns = None,
    exclude: Patterns = None,
    *,
    max_urls_to_crawl: int = DEFAULT_MAX_URLS_TO_CRAWL,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    selector: Optional[str] = None,
    ignore_selector: Optional[str] = None,
    wait_for_selector_timeout: float = DEFAULT_WAIT_FOR_SELECTOR_TIMEOUT,
    config: Optional[CrawlerConfig] = None,
    engine: Optional[FetchEngine] = None,
) -> List[PageRecord]:
    """
    Crawl from ``urls`` and return ``{url, title, content}`` for each fetched page.

    Failed URLs are left out of the result; use :func:`run_crawl` to see them.

    Example::

        pages = await crawl(["https://example.com"], match="https://example.com/**")
    """

    options = CrawlOptions(
        urls=list(urls),
        match=as_patterns(match),
        exclude=as_patterns(exclude),
        selector=selector,
        ignore_selector=ignore_selector,
        wait_for_selector_timeout=wait_for_selector_timeout,
        max_urls_to_crawl=max_urls_to_crawl,
        max_concurrency=max_concurrency,
    )
    report = await run_crawl(options, config=config, engine=engine)
    return report.pages
