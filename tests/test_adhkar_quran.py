import httpx

from companion.core.config import settings
from companion.services.adhkar_lists import load_menu_list, parse_menu_list

ADHKAR = settings.ADHKAR_BASE_URL
QURAN = settings.QURAN_BASE_URL

BOOK_BODY = {"English": [{"ID": 1, "TITLE": "When waking up", "TEXT": "https://www.hisnmuslim.com/api/en/1.json"}]}
CATEGORY_URL = "https://www.hisnmuslim.com/api/ar/27.json"
SURAH_BODY = {"code": 200, "status": "OK", "data": {"surahs": [{"number": 1}]}}

MENU_TEXT = """
{
  "TITLE": "أذكار الصباح والمساء",
  "TEXT": "http://www.hisnmuslim.com/api/ar/27.json"
},
{
  "TEXT": "http://www.hisnmuslim.com/api/ar/orphan.json"
},
{
  "TITLE": "أذكار النوم",
  "TEXT": "http://www.hisnmuslim.com/api/ar/28.json"
},
{
  "TITLE": "duplicate",
  "TEXT": "http://www.hisnmuslim.com/api/ar/27.json"
}
"""


# Adhkar book

def test_adhkar_book_is_cached_per_language(client, fake_upstream):
    url = f"{ADHKAR}/en/husn_en.json"
    fake_upstream.add(url, (200, BOOK_BODY))

    first = client.get("/api/adhkar/en")
    second = client.get("/api/adhkar/EN")

    assert first.status_code == 200
    assert first.json() == BOOK_BODY
    assert first.headers["cache-control"] == "public, max-age=3600, s-maxage=86400"
    assert second.json() == BOOK_BODY
    assert fake_upstream.count(url) == 1


def test_adhkar_arabic_book_url(client, fake_upstream):
    url = f"{ADHKAR}/ar/husn_ar.json"
    fake_upstream.add(url, (200, {"العربية": []}))

    assert client.get("/api/adhkar/ar").status_code == 200
    assert fake_upstream.count(url) == 1


def test_adhkar_rejects_unknown_language(client, fake_upstream):
    response = client.get("/api/adhkar/fr")

    assert response.status_code == 400
    assert response.json() == {"error": "Unsupported language. Use 'ar' or 'en'."}
    assert fake_upstream.calls == []


def test_adhkar_upstream_failure_is_bad_gateway(client, fake_upstream, sleeps):
    url = f"{ADHKAR}/ar/husn_ar.json"
    fake_upstream.add(url, (503, "maintenance"))

    response = client.get("/api/adhkar/ar")

    assert response.status_code == 502
    assert response.json() == {"error": "Failed to fetch Adhkar", "details": "Upstream error 503"}
    assert fake_upstream.count(url) == settings.UPSTREAM_RETRY_ATTEMPTS
    assert client.get("/api/adhkar/ar").status_code == 502


# Adhkar category fetch

def test_category_fetch_is_cached_by_url(client, fake_upstream):
    fake_upstream.add(CATEGORY_URL, (200, {"أذكار": [{"ID": 1}]}))

    first = client.get("/api/adhkar/fetch", params={"url": CATEGORY_URL})
    second = client.get("/api/adhkar/fetch", params={"url": CATEGORY_URL})

    assert first.status_code == 200
    assert first.json() == {"أذكار": [{"ID": 1}]}
    assert second.json() == first.json()
    assert fake_upstream.count(CATEGORY_URL) == 1


def test_category_fetch_only_allows_arabic_hisnmuslim_paths(client, fake_upstream):
    for url in [
        None,
        "",
        "not a url",
        "https://evil.example.com/api/ar/27.json",
        "https://hisnmuslim.com.evil.example/api/ar/27.json",
        "https://www.hisnmuslim.com/api/en/27.json",
        "ftp://www.hisnmuslim.com/api/ar/27.json",
    ]:
        params = {} if url is None else {"url": url}
        response = client.get("/api/adhkar/fetch", params=params)
        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid or unsupported URL. Use hisnmuslim.com/api/ar/*.json"
        }
    assert fake_upstream.calls == []


def test_category_fetch_accepts_bare_host(client, fake_upstream):
    url = "http://hisnmuslim.com/api/ar/30.json"
    fake_upstream.add(url, (200, {"ok": True}))

    assert client.get("/api/adhkar/fetch", params={"url": url}).status_code == 200


def test_category_fetch_network_failure_is_bad_gateway(client, fake_upstream):
    fake_upstream.add(CATEGORY_URL, httpx.ConnectError("connection refused"))

    response = client.get("/api/adhkar/fetch", params={"url": CATEGORY_URL})

    assert response.status_code == 502
    assert response.json()["error"] == "Failed to fetch category"
    assert "connection refused" in response.json()["details"]


def test_category_non_json_body_is_server_error(client, fake_upstream):
    fake_upstream.add(CATEGORY_URL, (200, "<html>"))

    response = client.get("/api/adhkar/fetch", params={"url": CATEGORY_URL})

    assert response.status_code == 500
    assert response.json()["error"] == "Server error"


# Adhkar menus

def test_menu_pairs_titles_with_urls_and_dedupes():
    items = parse_menu_list(MENU_TEXT)

    assert [item.model_dump() for item in items] == [
        {"title": "أذكار الصباح والمساء", "url": "http://www.hisnmuslim.com/api/ar/27.json"},
        {"title": "أذكار النوم", "url": "http://www.hisnmuslim.com/api/ar/28.json"},
    ]


def test_menu_route_reads_configured_file(client, tmp_path, monkeypatch):
    path = tmp_path / "api list.txt"
    path.write_text(MENU_TEXT, encoding="utf-8")
    monkeypatch.setattr(settings, "ADHKAR_AR_LIST_PATH", str(path))

    response = client.get("/api/adhkar/ar-list")

    assert response.status_code == 200
    assert response.json()["items"] == [item.model_dump() for item in load_menu_list(str(path))]
    assert len(response.json()["items"]) == 2


def test_missing_menu_file_is_server_error(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "ADHKAR_EN_LIST_PATH", str(tmp_path / "missing.txt"))

    response = client.get("/api/adhkar/en-list")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to read English menu list"


# Quran

def test_quran_editions_are_cached(client, fake_upstream):
    url = f"{QURAN}/quran-uthmani"
    fake_upstream.add(url, (200, SURAH_BODY))

    first = client.get("/api/quran/ar")
    second = client.get("/api/quran/ar")

    assert first.status_code == 200
    assert first.json() == SURAH_BODY
    assert first.headers["cache-control"] == "public, s-maxage=86400, stale-while-revalidate=43200"
    assert second.json() == SURAH_BODY
    assert fake_upstream.count(url) == 1


def test_quran_english_uses_asad(client, fake_upstream):
    url = f"{QURAN}/en.asad"
    fake_upstream.add(url, (200, SURAH_BODY))

    assert client.get("/api/quran/en").status_code == 200
    assert fake_upstream.count(url) == 1


def test_quran_rejects_unknown_language(client, fake_upstream):
    response = client.get("/api/quran/de")

    assert response.status_code == 400
    assert response.json() == {"code": 400, "status": "invalid_language"}
    assert fake_upstream.calls == []


def test_quran_upstream_failure_is_bad_gateway(client, fake_upstream, sleeps):
    url = f"{QURAN}/en.asad"
    fake_upstream.add(url, httpx.ConnectError("connection refused"))

    response = client.get("/api/quran/en")

    assert response.status_code == 502
    assert response.json() == {
        "code": 502,
        "status": "upstream_unreachable",
        "error": "Failed to fetch Quran data from upstream",
    }
    assert len(sleeps) == settings.UPSTREAM_RETRY_ATTEMPTS - 1
