import pytest

from tests.helpers.crawler_imports import filter_links, match_glob, normalize_url


@pytest.mark.parametrize(
    "url",
    [
        "https://ex.com/a",
        "https://ex.com/",
        "http://ex.com:8080/path?q=1",
        "https://ex.com/#/spa/route",
    ],
)
def test_normalizing_absolute_url_is_idempotent(url):
    normalized = normalize_url(url)

    assert normalized == url
    assert normalize_url(normalized) == normalized


def test_relative_url_resolves_against_base_consistently():
    first = normalize_url("/c", "https://ex.com/a/b")
    second = normalize_url("/c", "https://ex.com/a/b")

    assert first == second == "https://ex.com/c"
    assert normalize_url("d", "https://ex.com/a/b") == "https://ex.com/a/d"


def test_normalize_canonicalizes_host_port_and_fragment():
    assert normalize_url("HTTPS://Ex.COM:443/Path#section") == "https://ex.com/Path"
    assert normalize_url("http://ex.com:80") == "http://ex.com/"


def test_normalize_rejects_uncrawlable_urls():
    assert normalize_url("") is None
    assert normalize_url(None) is None
    assert normalize_url("mailto:someone@ex.com") is None
    assert normalize_url("javascript:void(0)") is None
    assert normalize_url("/relative-without-base") is None
    assert normalize_url("http://ex.com:notaport/") is None


def test_glob_star_does_not_cross_segments():
    assert match_glob("https://ex.com/docs/a", "https://ex.com/docs/*")
    assert not match_glob("https://ex.com/docs/a/b", "https://ex.com/docs/*")
    assert match_glob("https://ex.com/docs/a/b", "https://ex.com/docs/**")
    assert match_glob("https://ex.com/docs/a", "https://ex.com/docs/?")
    assert not match_glob("https://ex.com/docs/ab", "https://ex.com/docs/?")


def test_glob_wildcards_skip_dot_segments():
    assert not match_glob("https://ex.com/.git", "https://ex.com/*")
    assert not match_glob("https://ex.com/.x", "https://ex.com/?x")
    assert not match_glob("https://ex.com/.well-known/a", "https://ex.com/**")
    assert not match_glob("https://ex.com/.hidden/admin/x", "**/admin/**")
    assert match_glob("https://ex.com/.well-known/a", "https://ex.com/.well-known/*")
    assert match_glob("https://ex.com/a.b/c.html", "https://ex.com/**")
    assert match_glob("https://ex.com/file.txt", "https://ex.com/file*")


def test_globstar_slash_matches_zero_segments():
    assert match_glob("https://ex.com/admin", "https://ex.com/**/admin")
    assert match_glob("https://ex.com/a/b/admin", "https://ex.com/**/admin")


def test_glob_escapes_regex_characters():
    assert match_glob("https://ex.com/a.html?x=1", "https://ex.com/a.html?x=1")
    assert not match_glob("https://ex.com/aXhtml", "https://ex.com/a.html")


def test_filter_links_without_patterns_keeps_all():
    links = ["https://a.com/1", "https://b.com/2"]

    assert filter_links(links) == links
    assert filter_links(links, match=[], exclude=None) == links


def test_filter_links_applies_match_then_exclude():
    links = ["https://a.com/1", "https://a.com/private/2", "https://b.com/3"]

    kept = filter_links(links, match="https://a.com/**", exclude=["**/private/**"])

    assert kept == ["https://a.com/1"]
