import json

import httpx
import pytest

from companion.core.exceptions.errors import UpstreamError
from companion.db.schemas.upstream import HadithItem, HadithMetadata
from companion.services.book_store import BookStore
from companion.services.hadith_library import (
    HadithLibrary,
    filter_by_query,
    filter_by_section,
    get_sections,
    normalize_edition,
    paginate_hadiths,
)
from companion.services.local_store import JsonFileLocalStore
from companion.services.tafsir_reader import TafsirReader

EDITION = {
    "metadata": {
        "name": "Forty Hadith of an-Nawawi",
        "section": {"1": "Intentions", "2": "Islam"},
        "section_detail": {
            "1": {"hadithnumber_first": 1, "hadithnumber_last": 1},
            "2": {"hadithnumber_first": 2, "hadithnumber_last": 3},
        },
    },
    "hadiths": [
        {"hadithnumber": 1, "arabicnumber": 1, "text": "Actions are judged by intentions"},
        {"hadithnumber": 2, "arabicnumber": 2, "text": "Islam is built upon five"},
        {"hadithnumber": 3, "arabicnumber": 3, "text": "Leave what makes you doubt"},
    ],
}


def proxy_client(routes, calls):
    def handler(request):
        calls.append(request.url.path)
        status, body = routes.get(request.url.path, (404, {"error": "missing"}))
        return httpx.Response(status, json=body)

    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://companion.test"
    )


async def test_edition_is_downloaded_once_then_served_from_memory():
    calls = []
    client = proxy_client({"/api/hadith/en/nawawi": (200, EDITION)}, calls)
    library = HadithLibrary(client)

    first = await library.fetch_edition("en", "nawawi")
    second = await library.fetch_edition("en", "nawawi")

    assert first.metadata.name == "Forty Hadith of an-Nawawi"
    assert len(second.hadiths) == 3
    assert calls == ["/api/hadith/en/nawawi"]


async def test_edition_survives_in_book_store(session_factory):
    calls = []
    books = BookStore(session_factory)
    client = proxy_client({"/api/hadith/ar/nawawi": (200, EDITION)}, calls)

    await HadithLibrary(client, book_store=books).fetch_edition("ar", "nawawi")
    # A fresh library has an empty memory cache but the same durable store
    offline = await HadithLibrary(client, book_store=books).fetch_edition("ar", "nawawi")

    assert len(offline.hadiths) == 3
    assert calls == ["/api/hadith/ar/nawawi"]
    assert [b["id"] for b in await books.list()] == ["ar:nawawi"]

    await books.delete("ar", "nawawi")
    assert await books.get("ar", "nawawi") is None


async def test_refresh_bypasses_caches():
    calls = []
    library = HadithLibrary(proxy_client({"/api/hadith/en/nawawi": (200, EDITION)}, calls))

    await library.fetch_edition("en", "nawawi")
    await library.fetch_edition("en", "nawawi", refresh=True)

    assert len(calls) == 2


async def test_failed_download_raises_upstream_error():
    library = HadithLibrary(proxy_client({"/api/hadith/en/bukhari": (502, {"error": "x"})}, []))

    with pytest.raises(UpstreamError) as excinfo:
        await library.fetch_edition("en", "bukhari")
    assert excinfo.value.status == 502


def test_normalize_edition_rejects_wrong_shapes():
    with pytest.raises(ValueError):
        normalize_edition({"hadiths": "not a list"})


def test_sections_and_filters():
    edition = normalize_edition(EDITION)

    sections = get_sections(edition.metadata)
    assert sections == [
        {"id": "1", "name": "Intentions", "first": 1, "last": 1},
        {"id": "2", "name": "Islam", "first": 2, "last": 3},
    ]
    assert get_sections(HadithMetadata()) == []

    in_section = filter_by_section(edition.hadiths, 2, 3)
    assert [h.hadithnumber for h in in_section] == [2, 3]
    assert filter_by_section(edition.hadiths) == edition.hadiths

    assert [h.hadithnumber for h in filter_by_query(edition.hadiths, "  DOUBT ")] == [3]
    assert filter_by_query(edition.hadiths, "") == edition.hadiths


def test_pagination():
    items = [HadithItem(hadithnumber=n) for n in range(45)]
    pages = paginate_hadiths(items, per_page=20)
    assert [len(page) for page in pages] == [20, 20, 5]


async def test_tafsir_reader_caches_and_remembers_last_surah(tmp_path):
    calls = []
    body = {"lang": "en", "sura": 112, "verses": [{"ayah": 1, "text": "Say, He is Allah, One"}]}
    client = proxy_client({"/api/tafsir/en/112": (200, body)}, calls)
    store_path = tmp_path / "local" / "store.json"
    reader = TafsirReader(client, local_store=JsonFileLocalStore(str(store_path)))

    verses = await reader.fetch_tafsir("en", 112)
    again = await reader.fetch_tafsir("en", 112)
    reader.remember_last_surah("en", 112)

    assert verses[0].text == "Say, He is Allah, One"
    assert again == verses
    assert calls == ["/api/tafsir/en/112"]
    assert reader.last_surah("en") == 112
    assert reader.last_surah("ar") == 1
    assert json.loads(store_path.read_text(encoding="utf-8")) == {"lastSurah:en": 112}
    assert JsonFileLocalStore(str(store_path)).get("lastSurah:en") == 112
