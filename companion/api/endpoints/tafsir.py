from fastapi import APIRouter, status

from companion.core.config import settings
from companion.core.dependencies import CachesDependency, UpstreamDependency
from companion.core.responses import TAFSIR_CACHE, send_cached, send_error, send_server_error
from companion.db.schemas.upstream import TafsirSura, normalize_tafsir
from companion.services.upstream import NETWORK_FAILURES, PARSE_FAILURES
from companion.utils.validation import parse_int

router = APIRouter(prefix="/tafsir", tags=["tafsir"])

TRANSLATIONS = {"ar": "arabic_moyassar", "en": "english_saheeh"}
SURA_COUNT = 114


@router.get("/{lang}/{sura}")
async def tafsir(
    lang: str,
    sura: str,
    caches: CachesDependency,
    upstream: UpstreamDependency,
):
    lang = lang.lower()
    if lang not in TRANSLATIONS:
        return send_error("Invalid language")
    sura_number = parse_int(sura)
    if sura_number is None or not 1 <= sura_number <= SURA_COUNT:
        return send_error("Invalid sura", details={"min": 1, "max": SURA_COUNT})

    cache_key = f"{lang}:{sura_number}"
    cached = await caches.tafsir.get(cache_key)
    if cached is not None:
        return send_cached(cached, TAFSIR_CACHE)

    url = f"{settings.TAFSIR_BASE_URL}/{TRANSLATIONS[lang]}/{sura_number}"
    try:
        raw = await upstream.get_json_with_retry(url)
    except NETWORK_FAILURES as exc:
        return send_error(
            "Failed to fetch Tafsir data from upstream",
            details=str(exc) or type(exc).__name__,
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    except PARSE_FAILURES as exc:
        return send_server_error(exc)

    sura_payload = TafsirSura(lang=lang, sura=sura_number, verses=normalize_tafsir(raw))
    payload = sura_payload.model_dump(exclude_none=True)
    await caches.tafsir.set(cache_key, payload)
    return send_cached(payload, TAFSIR_CACHE)
