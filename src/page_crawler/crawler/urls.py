"""URL normalization and glob filtering used by the frontier."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Union
from urllib.parse import urljoin, urlparse, urlunparse

Patterns = Union[str, Sequence[str], None]


def normalize_url(url: Optional[str], base: Optional[str] = None) -> Optional[str]:
    """
    Return the canonical absolute form of ``url`` or ``None`` if it is not crawlable.

    - Joins relative URLs against ``base``
    - Drops fragments unless they are SPA routes (``#/...``)
    - Lowercases scheme and host
    - Removes default ports (:80, :443)
    - Keeps querystrings (they matter for uniqueness)
    """
    if not url:
        return None

    candidate = url.strip()
    if base:
        candidate = urljoin(base, candidate)

    try:
        parsed = urlparse(candidate)
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https"):
        return None

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return None
    if ":" in hostname:
        hostname = f"[{hostname}]"

    if (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        netloc = hostname
    elif port:
        netloc = f"{hostname}:{port}"
    else:
        netloc = hostname

    if parsed.username:
        userinfo = parsed.username
        if parsed.password:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    fragment = parsed.fragment if parsed.fragment.startswith("/") else ""

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        fragment,
    ))


def as_patterns(value: Patterns) -> List[str]:
    """Accept a single pattern or a sequence of them and drop empty entries."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [pattern.strip() for pattern in value if pattern and pattern.strip()]


_NO_DOT = r"(?!\.)"
_DOT_SAFE_SEGMENT = _NO_DOT + r"[^/]*"


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    # Wildcards never match a leading "." in a path segment.
    pieces: List[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        segment_start = index == 0 or pattern[index - 1] == "/"
        if char == "*":
            if pattern.startswith("**", index):
                index += 2
                if segment_start and pattern.startswith("/", index):
                    # "**/" also matches zero segments.
                    pieces.append(f"(?:{_DOT_SAFE_SEGMENT}/)*")
                    index += 1
                elif segment_start:
                    pieces.append(f"(?:{_DOT_SAFE_SEGMENT}(?:/{_DOT_SAFE_SEGMENT})*)?")
                else:
                    pieces.append(f"[^/]*(?:/{_DOT_SAFE_SEGMENT})*")
                continue
            pieces.append(_DOT_SAFE_SEGMENT if segment_start else "[^/]*")
        elif char == "?":
            pieces.append(_NO_DOT + "[^/]" if segment_start else "[^/]")
        else:
            pieces.append(re.escape(char))
        index += 1
    return re.compile("".join(pieces) + r"\Z", re.DOTALL)


def match_glob(url: str, pattern: str) -> bool:
    """Glob match where ``*``/``?`` stay within a path segment and ``**`` spans segments.

    Wildcards do not match a segment starting with ``.`` unless the dot is literal.
    """
    return _compile_glob(pattern).match(url) is not None


def filter_links(
    links: Iterable[str],
    match: Patterns = None,
    exclude: Patterns = None,
) -> List[str]:
    """Keep links matching any ``match`` pattern and no ``exclude`` pattern."""
    include_patterns = as_patterns(match)
    exclude_patterns = as_patterns(exclude)

    kept: List[str] = []
    for link in links:
        if include_patterns and not any(match_glob(link, p) for p in include_patterns):
            continue
        if any(match_glob(link, p) for p in exclude_patterns):
            continue
        kept.append(link)
    return kept
