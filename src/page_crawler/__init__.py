"""Bounded headless-browser crawler."""

from .core.errors import CrawlError, HandlerError, NavigationError, WaitTimeoutError
from .core.report import CrawlFailure, CrawlReport
from .crawler.runner import CrawlOptions, crawl, run_crawl
from .crawler.scheduler import Crawler

__all__ = [
    "CrawlError",
    "CrawlFailure",
    "CrawlOptions",
    "CrawlReport",
    "Crawler",
    "HandlerError",
    "NavigationError",
    "WaitTimeoutError",
    "crawl",
    "run_crawl",
]
