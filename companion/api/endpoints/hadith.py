from fastapi import APIRouter, status

from companion.core.config import settings
from companion.core.dependencies import CachesDependency, UpstreamDependency
from companion.core.responses import CDN_CACHE, send_cached, send_error, send_server_error
from companion.db.schemas.upstream import HadithEdition, Unparsed, parse_payload
from companion.services.hadith_library import EDITIONS, LANGS
from companion.services.upstream import NETWORK_FAILURES, PARSE_FAILURES
from companion.utils.logging import get_logger

router = APIRouter(prefix="/hadith", tags=["hadith"])

logger = get_logger()


def edition_url(lang: str, edition: str) -> str:
    lang_code = "ara" if lang == "ar" else "eng"
    return f"{settings.HADITH_CDN_BASE_URL}/editions/{lang_code}-{edition}.json"


def _proxy_failure(exc: Exception):
    return send_error(
        "Proxy failure",
        details=str(exc) or type(exc).__name__,
        status_code=status.HTTP_502_BAD_GATEWAY,
    )


@router.get("/info")
async def hadith_info(caches: CachesDependency, upstream: UpstreamDependency):
    cached = await caches.hadith_info.get("info")
    if cached is not None:
        return send_cached(cached, CDN_CACHE)

    try:
        data = await upstream.get_json_with_retry(f"{settings.HADITH_CDN_BASE_URL}/info.json")
    except NETWORK_FAILURES as exc:
        return _proxy_failure(exc)
    except PARSE_FAILURES as exc:
        return send_server_error(exc)

    await caches.hadith_info.set("info", data)
    return send_cached(data, CDN_CACHE)


@router.get("/{lang}/{edition}")
async def hadith_edition(
    lang: str,
    edition: str,
    caches: CachesDependency,
    upstream: UpstreamDependency,
):
    lang = lang.lower()
    edition = edition.lower()
    if lang not in LANGS:
        return send_error("Invalid language")
    if edition not in EDITIONS:
        return send_error("Invalid edition")

    cache_key = f"{lang}:{edition}"
    cached = await caches.hadith.get(cache_key)
    if cached is not None:
        logger.debug(f"Hadith cache hit: {cache_key}")
        return send_cached(cached, CDN_CACHE)

    url = edition_url(lang, edition)
    try:
        data = await upstream.get_json_with_retry(url)
    except NETWORK_FAILURES as exc:
        return _proxy_failure(exc)
    except PARSE_FAILURES as exc:
        return send_server_error(exc)

    parsed = parse_payload(HadithEdition, data)
    if isinstance(parsed, Unparsed):
        logger.warning(f"Unexpected hadith edition payload from {url}: {parsed.error}")
    await caches.hadith.set(cache_key, data)
    return send_cached(data, CDN_CACHE)
