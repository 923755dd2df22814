"""Raw fetch result caching."""

from cspi.core.data.cache.base import CacheStrategy
from cspi.core.data.cache.key import make_cache_key
from cspi.core.data.cache.memory import CacheEntry, FifoTTLCache

__all__ = [
    "CacheStrategy",
    "CacheEntry",
    "FifoTTLCache",
    "make_cache_key",
]
