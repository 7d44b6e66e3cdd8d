from typing import Any, Optional
from aiocache import SimpleMemoryCache
from aiocache.serializers import PickleSerializer

from core.config import settings

def get_cache(namespace: str) -> SimpleMemoryCache:
    """Create an in-memory cache for one upstream namespace.

    Each client owns its cache instance so tests and app instances never
    share entries.
    """
    return SimpleMemoryCache(
        serializer=PickleSerializer(),
        namespace=f"{settings.cache['prefix']}:{namespace}:"
    )

def cache_enabled() -> bool:
    return bool(settings.cache.get("enabled", True))

def cache_ttl(namespace: str) -> Optional[int]:
    """TTL for a namespace, None means no expiration."""
    return settings.get_cache_ttl().get(namespace)

def cache_key(*parts: Any) -> str:
    """Standard cache key builder, e.g. cache_key("station", "46232").

    Floats are rounded to 4 decimals so coordinate keys stay stable.
    """
    if not parts:
        raise ValueError("at least one key part is required for caching")

    normalized = []
    for part in parts:
        if isinstance(part, float):
            normalized.append(f"{part:.4f}")
        else:
            normalized.append(str(part))
    return ":".join(normalized)
