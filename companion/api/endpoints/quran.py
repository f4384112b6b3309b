from fastapi import APIRouter, status

from companion.core.config import settings
from companion.core.dependencies import CachesDependency, UpstreamDependency
from companion.core.exceptions.errors import UpstreamError
from companion.core.responses import QURAN_CACHE, send_cached, send_envelope, send_server_error
from companion.services.upstream import NETWORK_FAILURES, PARSE_FAILURES
from companion.utils.logging import get_upstream_logger

router = APIRouter(prefix="/quran", tags=["quran"])

logger = get_upstream_logger()

EDITIONS = {"ar": "quran-uthmani", "en": "en.asad"}


@router.get("/{lang}")
async def quran_text(lang: str, caches: CachesDependency, upstream: UpstreamDependency):
    """Full Quran text: Uthmani script for ``ar``, Asad's translation for ``en``."""
    lang = lang.lower()
    if lang not in EDITIONS:
        return send_envelope(
            code=status.HTTP_400_BAD_REQUEST, status_text="invalid_language"
        )

    cached = await caches.quran.get(lang)
    if cached is not None:
        return send_cached(cached, QURAN_CACHE)

    url = f"{settings.QURAN_BASE_URL}/{EDITIONS[lang]}"
    try:
        data = await upstream.get_json_with_retry(url)
    except (UpstreamError, *NETWORK_FAILURES) as exc:
        # Upstream detail stays in the log, not in the response
        logger.warning(f"Quran upstream {url} unreachable: {exc!r}")
        return send_envelope(
            code=status.HTTP_502_BAD_GATEWAY,
            status_text="upstream_unreachable",
            error="Failed to fetch Quran data from upstream",
        )
    except PARSE_FAILURES as exc:
        return send_server_error(exc)

    await caches.quran.set(lang, data)
    return send_cached(data, QURAN_CACHE)
