from typing import Optional

import httpx

from companion.core.exceptions.errors import UpstreamError
from companion.db.schemas.upstream import TafsirVerse, normalize_tafsir
from companion.services.local_store import MemoryLocalStore
from companion.utils.caching import InMemoryBackend, TTLCache

DAY = 24 * 60 * 60


class TafsirReader:
    """Reader-side tafsir access with a memory cache and last-surah bookmark."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        memory_cache: Optional[TTLCache] = None,
        local_store: Optional[MemoryLocalStore] = None,
    ):
        self._client = client
        self._memory = memory_cache or TTLCache("tafsir-reader", DAY, InMemoryBackend())
        self._local_store = local_store if local_store is not None else MemoryLocalStore()

    async def fetch_tafsir(self, lang: str, sura: int) -> list[TafsirVerse]:
        key = f"{lang}:{sura}"
        cached = await self._memory.get(key)
        if cached is not None:
            return [TafsirVerse.model_validate(verse) for verse in cached]

        response = await self._client.get(f"/api/tafsir/{lang}/{sura}")
        if not response.is_success:
            raise UpstreamError(response.status_code, response.text, str(response.url))
        verses = normalize_tafsir(response.json())
        await self._memory.set(key, [verse.model_dump() for verse in verses])
        return verses

    def remember_last_surah(self, lang: str, sura: int):
        self._local_store.set(f"lastSurah:{lang}", sura)

    def last_surah(self, lang: str, default: int = 1) -> int:
        return self._local_store.get(f"lastSurah:{lang}", default)
