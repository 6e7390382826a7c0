"""Keyed in-memory cache used by the HTTP adapter."""

from .memory import CacheStrategy, EvictionPolicy, InMemoryCache

__all__ = ["CacheStrategy", "EvictionPolicy", "InMemoryCache"]
