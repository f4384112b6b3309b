from dataclasses import dataclass
from typing import Any, Callable, Optional
import json
import time

import redis.asyncio as aioredis

from companion.utils.logging import get_logger

logger = get_logger()


@dataclass
class CacheEntry:
    key: str
    timestamp: float  # epoch seconds at write time
    payload: Any


class InMemoryBackend:
    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    async def read(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    async def write(self, entry: CacheEntry, ttl: int):
        # Expiry is checked on read; nothing sweeps this dict
        self._entries[entry.key] = entry

    async def delete(self, key: str):
        self._entries.pop(key, None)

    async def close(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisBackend:
    def __init__(self, url: str):
        self._redis = aioredis.from_url(url)

    async def read(self, key: str) -> Optional[CacheEntry]:
        raw = await self._redis.get(key)
        if not raw:
            return None
        data = json.loads(raw)
        return CacheEntry(key=key, timestamp=data["timestamp"], payload=data["payload"])

    async def write(self, entry: CacheEntry, ttl: int):
        value = json.dumps({"timestamp": entry.timestamp, "payload": entry.payload})
        await self._redis.set(entry.key, value, ex=ttl if ttl > 0 else None)

    async def delete(self, key: str):
        await self._redis.delete(key)

    async def close(self):
        await self._redis.aclose()


class TTLCache:
    """
    Keyed payload cache with a fixed time-to-live.

    An entry older than ``ttl`` seconds is treated as absent and removed the
    next time it is looked up. Check-then-set is not atomic across awaits, so
    two concurrent misses for one key may both go upstream.
    """

    def __init__(
        self,
        namespace: str,
        ttl: float,
        backend,
        clock: Callable[[], float] = time.time,
    ):
        self.namespace = namespace
        self.ttl = ttl
        self._backend = backend
        self._clock = clock

    def _backend_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        backend_key = self._backend_key(key)
        entry = await self._backend.read(backend_key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp > self.ttl:
            await self._backend.delete(backend_key)
            logger.debug(f"Cache expired: {backend_key}")
            return None
        return entry.payload

    async def set(self, key: str, payload: Any):
        backend_key = self._backend_key(key)
        entry = CacheEntry(key=backend_key, timestamp=self._clock(), payload=payload)
        await self._backend.write(entry, ttl=int(self.ttl))


@dataclass
class ProxyCaches:
    calendar: TTLCache
    convert: TTLCache
    hadith: TTLCache
    hadith_info: TTLCache
    tafsir: TTLCache
    featured: TTLCache
    adhkar: TTLCache
    adhkar_category: TTLCache
    quran: TTLCache
    backend: Any

    async def close(self):
        await self.backend.close()


def build_backend(settings):
    cache_type = settings.CACHE_TYPE.lower()
    if cache_type == "redis" and settings.REDIS_URL:
        return RedisBackend(settings.REDIS_URL)
    if cache_type not in ("inmemory", "redis"):
        logger.warning(f"Unknown CACHE_TYPE '{settings.CACHE_TYPE}', using inmemory")
    return InMemoryBackend()


def build_caches(
    settings, backend=None, clock: Callable[[], float] = time.time
) -> ProxyCaches:
    backend = backend or build_backend(settings)

    def make(namespace: str, ttl: float) -> TTLCache:
        return TTLCache(namespace, ttl, backend, clock=clock)

    return ProxyCaches(
        calendar=make("calendar", settings.CALENDAR_CACHE_TTL),
        convert=make("convert", settings.CONVERT_CACHE_TTL),
        hadith=make("hadith", settings.HADITH_CACHE_TTL),
        hadith_info=make("hadith_info", settings.HADITH_CACHE_TTL),
        tafsir=make("tafsir", settings.TAFSIR_CACHE_TTL),
        featured=make("featured", settings.FEATURED_STORY_CACHE_TTL),
        adhkar=make("adhkar", settings.ADHKAR_CACHE_TTL),
        adhkar_category=make("adhkar_category", settings.ADHKAR_CACHE_TTL),
        quran=make("quran", settings.QURAN_CACHE_TTL),
        backend=backend,
    )
