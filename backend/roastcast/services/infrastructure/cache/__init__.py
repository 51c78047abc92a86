"""
Cache Module

Process-wide TTL cache for expensive generation results. A single instance
is created at application startup and injected into the use cases.

Usage:
    from roastcast.services.infrastructure.cache import TTLCache
"""

from .ttl_cache import TTLCache, CacheEntry

__all__ = [
    "TTLCache",
    "CacheEntry",
]
