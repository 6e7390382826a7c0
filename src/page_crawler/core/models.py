"""Shared data structures used across the crawler."""

from __future__ import annotations

from typing import TypedDict


class PageRecord(TypedDict):
    """Represents a single page fetched by the crawler."""

    url: str
    title: str
    content: str
