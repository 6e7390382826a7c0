import pytest

import page_crawler.core.config as config_module  # type: ignore[import]

from tests.helpers.crawler_imports import CrawlerConfig, load_configuration

ENV_KEYS = [
    "HOST",
    "PORT",
    "HEADLESS",
    "MAX_URLS_TO_CRAWL",
    "MAX_CONCURRENCY",
    "SERVER_MAX_CONCURRENCY",
    "WAIT_FOR_SELECTOR_TIMEOUT",
    "NAVIGATION_TIMEOUT",
    "CRAWL_CACHE_SIZE",
    "CRAWL_CACHE_STRATEGY",
    "CRAWL_CACHE_TTL",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_configuration_defaults():
    config = load_configuration()

    assert config.host == "localhost"
    assert config.port == 3000
    assert config.headless is True
    assert config.max_urls_to_crawl == 10
    assert config.max_concurrency == 10
    assert config.server_max_concurrency == 5
    assert config.wait_for_selector_timeout == 1000
    assert config.cache_strategy == "lru"
    assert config.cache_ttl is None
    assert config.base_url == "http://localhost:3000"


def test_load_configuration_uses_environment(monkeypatch):
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "8081")
    monkeypatch.setenv("HEADLESS", "false")
    monkeypatch.setenv("MAX_URLS_TO_CRAWL", "25")
    monkeypatch.setenv("MAX_CONCURRENCY", "4")
    monkeypatch.setenv("CRAWL_CACHE_STRATEGY", "LFU")
    monkeypatch.setenv("CRAWL_CACHE_TTL", "60000")

    config = load_configuration()

    assert config.host == "0.0.0.0"
    assert config.port == 8081
    assert config.headless is False
    assert config.max_urls_to_crawl == 25
    assert config.max_concurrency == 4
    assert config.cache_strategy == "lfu"
    assert config.cache_ttl == 60000.0


def test_explicit_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("MAX_URLS_TO_CRAWL", "25")
    monkeypatch.setenv("PORT", "8081")

    config = load_configuration(max_urls_to_crawl=3, port=9000, headless=False)

    assert config.max_urls_to_crawl == 3
    assert config.port == 9000
    assert config.headless is False


def test_config_rejects_invalid_values():
    with pytest.raises(ValueError):
        CrawlerConfig(max_concurrency=0)
    with pytest.raises(ValueError):
        CrawlerConfig(cache_strategy="mru")


def test_zero_page_budget_is_accepted():
    config = load_configuration(max_urls_to_crawl=0)

    assert config.max_urls_to_crawl == 0
    with pytest.raises(ValueError):
        CrawlerConfig(max_urls_to_crawl=-1)
