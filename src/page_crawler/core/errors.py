"""Error taxonomy for per-URL crawl failures."""

from __future__ import annotations


class CrawlError(Exception):
    """Base class for failures that are isolated to a single URL."""

    kind = "crawl"

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(f"{url}: {message}")


class NavigationError(CrawlError):
    """The page failed to load."""

    kind = "navigation"


class WaitTimeoutError(CrawlError, TimeoutError):
    """The expected content never appeared on the page."""

    kind = "timeout"

    def __init__(self, url: str, selector: str, timeout_ms: float) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(url, f"'{selector}' not ready after {timeout_ms:g}ms")


class HandlerError(CrawlError):
    """The request handler raised while processing a page."""

    kind = "handler"

    def __init__(self, url: str, error: BaseException) -> None:
        self.error = error
        super().__init__(url, f"{type(error).__name__}: {error}")
