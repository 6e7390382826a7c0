"""JSON HTTP adapter exposing the crawler over ``GET /crawl``."""

from __future__ import annotations

import asyncio
import http.server
import json
import logging
import socketserver
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from ..cache.memory import InMemoryCache
from ..core.config import CrawlerConfig
from ..core.models import PageRecord
from ..crawler.runner import CrawlOptions, run_crawl

logger = logging.getLogger(__name__)

CrawlFunction = Callable[[CrawlOptions], List[PageRecord]]
CacheKey = Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...], int]

MISSING_PARAMS_ERROR = "Urls and match must be appear in query"


class BadRequest(ValueError):
    pass


def _split_param(params: Dict[str, List[str]], name: str) -> List[str]:
    values: List[str] = []
    for raw in params.get(name, []):
        values.extend(part.strip() for part in raw.split(",") if part.strip())
    return values


def parse_crawl_query(query: str, config: CrawlerConfig) -> CrawlOptions:
    """Translate ``/crawl`` query parameters into :class:`CrawlOptions`."""

    params = parse_qs(query)
    urls = _split_param(params, "urls")
    match = _split_param(params, "match")
    if not urls or not match:
        raise BadRequest(MISSING_PARAMS_ERROR)

    raw_max = params.get("maxUrlsToCrawl", [""])[0].strip()
    try:
        max_urls = int(raw_max) if raw_max else config.max_urls_to_crawl
    except ValueError as exc:
        raise BadRequest("maxUrlsToCrawl must be an integer") from exc
    if max_urls < 0:
        raise BadRequest("maxUrlsToCrawl must not be negative")

    return CrawlOptions(
        urls=urls,
        match=match,
        exclude=_split_param(params, "exclude"),
        wait_for_selector_timeout=config.wait_for_selector_timeout,
        max_urls_to_crawl=max_urls,
        max_concurrency=config.server_max_concurrency,
    )


def cache_key(options: CrawlOptions) -> CacheKey:
    return (
        tuple(options.urls),
        tuple(sorted(options.match)),
        tuple(sorted(options.exclude)),
        options.max_urls_to_crawl,
    )


def default_crawl_function(config: CrawlerConfig) -> CrawlFunction:
    def run(options: CrawlOptions) -> List[PageRecord]:
        return asyncio.run(run_crawl(options, config=config)).pages

    return run


def _handler_factory(
    config: CrawlerConfig,
    crawl_fn: CrawlFunction,
    cache: InMemoryCache[CacheKey, List[PageRecord]],
):
    # Request threads share the cache.
    cache_lock = threading.Lock()

    class RequestHandler(http.server.BaseHTTPRequestHandler):
        def do_GET(self):  # type: ignore[override]
            parsed = urlparse(self.path)
            if parsed.path == "/":
                self._send_json(200, {"message": "Pong!"})
            elif parsed.path == "/crawl":
                self._handle_crawl(parsed.query)
            else:
                self._send_not_found()

        def do_POST(self):  # type: ignore[override]
            self._send_not_found()

        def _handle_crawl(self, query: str) -> None:
            try:
                options = parse_crawl_query(query, config)
            except BadRequest as exc:
                self._send_json(400, {"error": str(exc)})
                return

            key = cache_key(options)
            with cache_lock:
                data = cache.get(key)
            if data is not None:
                logger.debug("Serving cached crawl for %s", ", ".join(options.urls))
                self._send_json(200, {"data": data})
                return

            logger.info("Crawling %s", ", ".join(options.urls))
            try:
                data = crawl_fn(options)
            except Exception:
                logger.exception("Crawl failed for %s", ", ".join(options.urls))
                self._send_json(500, {"error": "Crawl failed"})
                return

            with cache_lock:
                cache.set(key, data)
            self._send_json(200, {"data": data})

        def _send_not_found(self) -> None:
            self._send_json(404, {"error": "Not Found"})

        def _send_json(self, status: int, payload: Dict[str, Any]) -> None:
            body = json.dumps(payload).encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args) -> None:  # noqa: A002
            logger.debug("%s - %s", self.address_string(), format % args)

    return RequestHandler


class _ThreadingServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads = True
    allow_reuse_address = True


@dataclass
class CrawlServer:
    config: CrawlerConfig
    crawl_fn: Optional[CrawlFunction] = None
    cache: Optional[InMemoryCache] = None
    _server: Optional[_ThreadingServer] = field(default=None, repr=False)
    _thread: Optional[threading.Thread] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.crawl_fn is None:
            self.crawl_fn = default_crawl_function(self.config)
        if self.cache is None:
            self.cache = InMemoryCache(
                max_size=self.config.cache_size,
                strategy=self.config.cache_strategy,
                ttl=self.config.cache_ttl,
            )

    @property
    def port(self) -> int:
        if self._server is None:
            return self.config.port
        return self._server.server_address[1]

    def _bind(self) -> _ThreadingServer:
        handler = _handler_factory(self.config, self.crawl_fn, self.cache)
        return _ThreadingServer((self.config.host, self.config.port), handler)

    def start(self) -> None:
        if self._server:
            return
        self._server = self._bind()
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Server is running on http://%s:%d", self.config.host, self.port)

    def serve_forever(self) -> None:
        if self._server:
            raise RuntimeError("server is already running in the background")
        self._server = self._bind()
        logger.info("Server is running on http://%s:%d", self.config.host, self.port)
        try:
            self._server.serve_forever()
        finally:
            self._server.server_close()
            self._server = None

    def stop(self) -> None:
        if not self._server:
            return
        self._server.shutdown()
        self._server.server_close()
        self._server = None
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None
