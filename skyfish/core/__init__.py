"""Core utilities."""

from skyfish.core.cache import CacheBackend, MemoryCache

__all__ = ["CacheBackend", "MemoryCache"]
