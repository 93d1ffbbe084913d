"""
Cache module for PerpSignal.

Provides Redis caching for the latest signal per symbol.
"""

from perpsignal.services.cache.signal_cache import (
    SignalCache,
    close_redis,
    get_signal_cache,
    init_redis,
)

__all__ = [
    "SignalCache",
    "close_redis",
    "get_signal_cache",
    "init_redis",
]
