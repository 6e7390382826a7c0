"""Configuration loading utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

CACHE_STRATEGIES = frozenset({"lru", "lfu", "fifo", "random"})


@dataclass(slots=True)
class CrawlerConfig:
    """Holds runtime options shared by the CLI, the HTTP adapter and the engine."""

    host: str = "localhost"
    port: int = 3000
    headless: bool = True
    max_urls_to_crawl: int = 10
    max_concurrency: int = 10
    server_max_concurrency: int = 5
    wait_for_selector_timeout: int = 1000
    navigation_timeout: int = 30000
    cache_size: int = 100
    cache_strategy: str = "lru"
    cache_ttl: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_urls_to_crawl < 0:
            raise ValueError("max_urls_to_crawl must not be negative")
        for name in (
            "max_concurrency",
            "server_max_concurrency",
            "cache_size",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be a positive integer")
        self.cache_strategy = self.cache_strategy.lower()
        if self.cache_strategy not in CACHE_STRATEGIES:
            raise ValueError(f"Unknown cache strategy: {self.cache_strategy}")

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "yes"}


def load_configuration(
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
    max_urls_to_crawl: Optional[int] = None,
    max_concurrency: Optional[int] = None,
    headless: Optional[bool] = None,
) -> CrawlerConfig:
    """Builds a ``CrawlerConfig`` from CLI input and environment variables."""

    load_dotenv()  # Loads .env values if present

    ttl_raw = os.getenv("CRAWL_CACHE_TTL")

    return CrawlerConfig(
        host=host or os.getenv("HOST") or "localhost",
        port=port if port is not None else _env_int("PORT", 3000),
        headless=headless if headless is not None else _env_flag("HEADLESS", True),
        max_urls_to_crawl=(
            max_urls_to_crawl
            if max_urls_to_crawl is not None
            else _env_int("MAX_URLS_TO_CRAWL", 10)
        ),
        max_concurrency=(
            max_concurrency
            if max_concurrency is not None
            else _env_int("MAX_CONCURRENCY", 10)
        ),
        server_max_concurrency=_env_int("SERVER_MAX_CONCURRENCY", 5),
        wait_for_selector_timeout=_env_int("WAIT_FOR_SELECTOR_TIMEOUT", 1000),
        navigation_timeout=_env_int("NAVIGATION_TIMEOUT", 30000),
        cache_size=_env_int("CRAWL_CACHE_SIZE", 100),
        cache_strategy=os.getenv("CRAWL_CACHE_STRATEGY") or "lru",
        cache_ttl=float(ttl_raw) if ttl_raw else None,
    )
