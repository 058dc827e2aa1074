import logging
import pickle
from typing import Any, Optional
from urllib.parse import quote

from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
from redis import asyncio as aioredis

from ..config import settings

logger = logging.getLogger(__name__)

UNIVERSITIES_NAMESPACE = "universities"


async def init_cache():
    """
    Initialize the cache backend when the application starts.
    Redis when REDIS_URL is set, otherwise an in-process store.
    """
    if settings.REDIS_URL:
        redis = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=False
        )
        backend = RedisBackend(redis)
        logger.info("Redis cache initialized")
    else:
        backend = InMemoryBackend()
        logger.info("In-memory cache initialized")
    FastAPICache.init(backend, prefix=settings.CACHE_PREFIX, expire=settings.CACHE_EXPIRE)


def build_key(namespace: str, *parts: Any) -> str:
    """
    Key layout is ``<prefix>:<namespace>:<parts...>`` so a namespace can be
    cleared as a whole. Parts are percent-encoded so a ":" inside a value
    cannot shift it into the next part.
    """
    tail = ":".join(quote("" if p is None else str(p), safe="") for p in parts)
    return f"{FastAPICache.get_prefix()}:{namespace}:{tail}"


async def get_cache(key: str) -> Any:
    """
    Directly get a cached value by key
    """
    try:
        value = await FastAPICache.get_backend().get(key)
        if value:
            return pickle.loads(value)
        return None
    except Exception as e:
        logger.warning(f"Error getting cache key {key}: {e}")
        return None


async def set_cache(
    key: str,
    value: Any,
    expire: Optional[int] = None
) -> bool:
    """
    Directly set a cached value with expiration
    """
    try:
        if expire is None:
            expire = settings.CACHE_EXPIRE
        await FastAPICache.get_backend().set(key, pickle.dumps(value), expire=expire)
        return True
    except Exception as e:
        logger.warning(f"Error setting cache key {key}: {e}")
        return False


async def invalidate_cache(*namespaces: str):
    """
    Drop every entry stored under the given namespaces
    """
    for namespace in namespaces:
        try:
            await FastAPICache.get_backend().clear(
                namespace=f"{FastAPICache.get_prefix()}:{namespace}"
            )
        except Exception as e:
            logger.warning(f"Error clearing cache namespace {namespace}: {e}")
