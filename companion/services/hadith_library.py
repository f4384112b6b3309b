from typing import Any, Optional

import httpx

from companion.core.exceptions.errors import UpstreamError
from companion.db.schemas.upstream import (
    HadithEdition,
    HadithItem,
    HadithMetadata,
    Unparsed,
    parse_payload,
)
from companion.services.book_store import BookStore
from companion.utils.caching import InMemoryBackend, TTLCache
from companion.utils.logging import get_logger

logger = get_logger()

DAY = 24 * 60 * 60

LANGS = ("ar", "en")
EDITIONS = (
    "abudawud",
    "bukhari",
    "dehlawi",
    "ibnmajah",
    "malik",
    "muslim",
    "nasai",
    "nawawi",
    "qudsi",
    "tirmidhi",
)

EDITION_OPTIONS = [
    {"id": "bukhari", "label": "Sahih al-Bukhari"},
    {"id": "muslim", "label": "Sahih Muslim"},
    {"id": "tirmidhi", "label": "Jami' at-Tirmidhi"},
    {"id": "abudawud", "label": "Sunan Abi Dawud"},
    {"id": "nasai", "label": "Sunan an-Nasa'i"},
    {"id": "ibnmajah", "label": "Sunan Ibn Majah"},
    {"id": "malik", "label": "Muwatta Malik"},
    {"id": "nawawi", "label": "Al-Nawawi"},
    {"id": "qudsi", "label": "Hadith Qudsi"},
    {"id": "dehlawi", "label": "Dehlawi"},
]


def normalize_edition(raw: Any) -> HadithEdition:
    parsed = parse_payload(HadithEdition, raw if isinstance(raw, dict) else {})
    if isinstance(parsed, Unparsed):
        raise ValueError(f"Unrecognised hadith edition payload: {parsed.error}")
    return parsed.value


class HadithLibrary:
    """
    Reader-side access to hadith editions served by the local proxy.

    Lookups go memory cache (24 h), then the durable book store, then the
    proxy. A download is written to both caches.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        memory_cache: Optional[TTLCache] = None,
        book_store: Optional[BookStore] = None,
    ):
        self._client = client
        self._memory = memory_cache or TTLCache("hadith-reader", DAY, InMemoryBackend())
        self._books = book_store

    async def fetch_edition(
        self, lang: str, edition: str, refresh: bool = False
    ) -> HadithEdition:
        key = f"{lang}:{edition}"
        if not refresh:
            cached = await self._memory.get(key)
            if cached is not None:
                return HadithEdition.model_validate(cached)
            if self._books:
                stored = await self._books.get(lang, edition)
                if stored is not None:
                    await self._memory.set(key, stored)
                    return HadithEdition.model_validate(stored)

        response = await self._client.get(f"/api/hadith/{lang}/{edition}")
        if not response.is_success:
            logger.warning(f"Failed to load hadith {edition} ({lang}): {response.status_code}")
            raise UpstreamError(response.status_code, response.text, str(response.url))

        book = normalize_edition(response.json())
        data = book.model_dump(exclude_none=True)
        await self._memory.set(key, data)
        if self._books:
            await self._books.put(lang, edition, data)
        return book

    async def fetch_info(self) -> dict[str, Any]:
        cached = await self._memory.get("info")
        if cached is not None:
            return cached
        response = await self._client.get("/api/hadith/info")
        if not response.is_success:
            raise UpstreamError(response.status_code, response.text, str(response.url))
        data = response.json()
        await self._memory.set("info", data)
        return data


def get_sections(metadata: Optional[HadithMetadata]) -> list[dict[str, Any]]:
    if metadata is None or not metadata.section:
        return []
    sections = []
    for section_id, name in metadata.section.items():
        detail = metadata.section_detail.get(section_id)
        sections.append(
            {
                "id": section_id,
                "name": name,
                "first": detail.hadithnumber_first if detail else None,
                "last": detail.hadithnumber_last if detail else None,
            }
        )
    return sections


def paginate_hadiths(items: list[HadithItem], per_page: int = 20) -> list[list[HadithItem]]:
    return [items[i : i + per_page] for i in range(0, len(items), per_page)]


def filter_by_section(
    items: list[HadithItem], first: Optional[float] = None, last: Optional[float] = None
) -> list[HadithItem]:
    if not first or not last:
        return items
    return [h for h in items if first <= (h.hadithnumber or 0) <= last]


def filter_by_query(items: list[HadithItem], query: str) -> list[HadithItem]:
    query = query.strip().lower()
    if not query:
        return items
    return [h for h in items if query in h.text.lower()]
