from typing import Annotated, Any, Optional

from fastapi import APIRouter, Query

from companion.core.config import settings
from companion.core.dependencies import CachesDependency, UpstreamDependency
from companion.core.responses import BROWSER_CACHE, send_cached, send_error, send_server_error
from companion.db.schemas.upstream import AladhanEnvelope, Unparsed, parse_payload
from companion.services.upstream import NETWORK_FAILURES, PARSE_FAILURES
from companion.utils.logging import get_logger
from companion.utils.validation import is_valid_date, parse_int

router = APIRouter(prefix="/aladhan", tags=["aladhan"])

logger = get_logger()

CONVERSION_TYPES = ("gToH", "hToG")
CALENDAR_ENDPOINTS = {"gToH": "gToHCalendar", "hToG": "hToGCalendar"}


def _warn_if_unparsed(payload: Any, url: str):
    parsed = parse_payload(AladhanEnvelope, payload)
    if isinstance(parsed, Unparsed):
        logger.warning(f"Unexpected Aladhan payload from {url}: {parsed.error}")


@router.get("/calendar")
async def calendar(
    caches: CachesDependency,
    upstream: UpstreamDependency,
    conversion: Annotated[Optional[str], Query(alias="type")] = None,
    month: Optional[str] = None,
    year: Optional[str] = None,
):
    if conversion not in CONVERSION_TYPES:
        return send_error("Invalid type. Use gToH or hToG.")
    month_number = parse_int(month)
    year_number = parse_int(year)
    if (
        month_number is None
        or not 1 <= month_number <= 12
        or year_number is None
        or year_number < 1
    ):
        return send_error("Invalid month/year.")

    cache_key = f"{conversion}:calendar:{month_number}-{year_number}"
    cached = await caches.calendar.get(cache_key)
    if cached is not None:
        logger.debug(f"Calendar cache hit: {cache_key}")
        return send_cached(cached, BROWSER_CACHE)

    endpoint = CALENDAR_ENDPOINTS[conversion]
    url = f"{settings.ALADHAN_BASE_URL}/{endpoint}/{month_number}/{year_number}"
    try:
        data = await upstream.get_json(url)
    except NETWORK_FAILURES + PARSE_FAILURES as exc:
        return send_server_error(exc)

    _warn_if_unparsed(data, url)
    await caches.calendar.set(cache_key, data)
    return send_cached(data, BROWSER_CACHE)


@router.get("/convert")
async def convert(
    caches: CachesDependency,
    upstream: UpstreamDependency,
    conversion: Annotated[Optional[str], Query(alias="type")] = None,
    date: Optional[str] = None,
):
    if conversion not in CONVERSION_TYPES:
        return send_error("Invalid type. Use gToH or hToG.")
    if not is_valid_date(date):
        return send_error("Invalid date. Use DD-MM-YYYY.")

    cache_key = f"{conversion}:{date}"
    cached = await caches.convert.get(cache_key)
    if cached is not None:
        logger.debug(f"Convert cache hit: {cache_key}")
        return send_cached(cached, BROWSER_CACHE)

    url = f"{settings.ALADHAN_BASE_URL}/{conversion}/{date}"
    try:
        data = await upstream.get_json(url)
    except NETWORK_FAILURES + PARSE_FAILURES as exc:
        return send_server_error(exc)

    _warn_if_unparsed(data, url)
    await caches.convert.set(cache_key, data)
    return send_cached(data, BROWSER_CACHE)
