from typing import Optional

import httpx
from fastapi import APIRouter, status

from companion.core.config import settings
from companion.core.dependencies import CachesDependency, UpstreamDependency
from companion.core.exceptions.errors import UpstreamError
from companion.core.responses import ADHKAR_CACHE, send_cached, send_error, send_server_error
from companion.services.adhkar_lists import load_menu_list
from companion.services.upstream import NETWORK_FAILURES, PARSE_FAILURES
from companion.utils.logging import get_logger

router = APIRouter(prefix="/adhkar", tags=["adhkar"])

logger = get_logger()

BOOKS = {"ar": "ar/husn_ar.json", "en": "en/husn_en.json"}
CATEGORY_HOSTS = ("hisnmuslim.com", "www.hisnmuslim.com")
CATEGORY_PATH_PREFIX = "/api/ar/"


def is_allowed_category_url(raw: Optional[str]) -> bool:
    if not raw:
        return False
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL:
        return False
    return (
        url.scheme in ("http", "https")
        and url.host.lower() in CATEGORY_HOSTS
        and url.path.startswith(CATEGORY_PATH_PREFIX)
    )


def _upstream_failure(message: str, exc: Exception):
    return send_error(
        message,
        details=str(exc) or type(exc).__name__,
        status_code=status.HTTP_502_BAD_GATEWAY,
    )


def _menu_response(path: str, error: str):
    try:
        items = load_menu_list(path)
    except OSError as exc:
        logger.error(f"{error} at {path}: {exc}")
        return send_error(
            error, details=str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return {"items": [item.model_dump() for item in items]}


@router.get("/ar-list")
async def arabic_menu():
    return _menu_response(settings.ADHKAR_AR_LIST_PATH, "Failed to read Arabic menu list")


@router.get("/en-list")
async def english_menu():
    return _menu_response(settings.ADHKAR_EN_LIST_PATH, "Failed to read English menu list")


@router.get("/fetch")
async def adhkar_category(
    caches: CachesDependency,
    upstream: UpstreamDependency,
    url: Optional[str] = None,
):
    """Proxy one Hisn al-Muslim category file (Arabic API paths only)."""
    if not is_allowed_category_url(url):
        return send_error("Invalid or unsupported URL. Use hisnmuslim.com/api/ar/*.json")

    cached = await caches.adhkar_category.get(url)
    if cached is not None:
        return send_cached(cached, ADHKAR_CACHE)

    try:
        data = await upstream.get_json_with_retry(url)
    except (UpstreamError, *NETWORK_FAILURES) as exc:
        return _upstream_failure("Failed to fetch category", exc)
    except PARSE_FAILURES as exc:
        return send_server_error(exc)

    await caches.adhkar_category.set(url, data)
    return send_cached(data, ADHKAR_CACHE)


@router.get("/{lang}")
async def adhkar_book(lang: str, caches: CachesDependency, upstream: UpstreamDependency):
    lang = lang.lower()
    if lang not in BOOKS:
        return send_error("Unsupported language. Use 'ar' or 'en'.")

    cached = await caches.adhkar.get(lang)
    if cached is not None:
        return send_cached(cached, ADHKAR_CACHE)

    try:
        data = await upstream.get_json_with_retry(f"{settings.ADHKAR_BASE_URL}/{BOOKS[lang]}")
    except (UpstreamError, *NETWORK_FAILURES) as exc:
        return _upstream_failure("Failed to fetch Adhkar", exc)
    except PARSE_FAILURES as exc:
        return send_server_error(exc)

    await caches.adhkar.set(lang, data)
    return send_cached(data, ADHKAR_CACHE)
