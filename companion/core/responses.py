from typing import Any, Generic, TypeVar

from fastapi import status
from pydantic import BaseModel
from fastapi.responses import JSONResponse

T = TypeVar("T")

# Browser keeps an hour; shared caches may keep a day and revalidate in the background
BROWSER_CACHE = "public, max-age=3600"
CDN_CACHE = "public, max-age=3600, s-maxage=86400, stale-while-revalidate=86400"
TAFSIR_CACHE = "public, max-age=3600, s-maxage=86400, stale-while-revalidate=43200"
FEATURED_CACHE = "public, max-age=1800"
ADHKAR_CACHE = "public, max-age=3600, s-maxage=86400"
QURAN_CACHE = "public, s-maxage=86400, stale-while-revalidate=43200"


class ErrorResponse(BaseModel):
    error: str
    details: Any = None


class Envelope(BaseModel, Generic[T]):
    """`{code, status, data}` shape used by the stories endpoints."""

    code: int = status.HTTP_200_OK
    status: str = "OK"
    data: T | None = None
    error: str | None = None


def send_error(
    error: str = "Error",
    details: Any = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    headers: dict | None = None,
) -> JSONResponse:
    content = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def send_cached(
    payload: Any, cache_control: str, status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    return JSONResponse(
        content=payload,
        status_code=status_code,
        headers={"Cache-Control": cache_control},
    )


def send_envelope(
    data: Any = None,
    code: int = status.HTTP_200_OK,
    status_text: str = "OK",
    error: str | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    content = Envelope(code=code, status=status_text, data=data, error=error)
    return JSONResponse(
        content=content.model_dump(exclude_none=True),
        status_code=code,
        headers=headers,
    )


def send_server_error(exc: Exception) -> JSONResponse:
    return send_error(
        "Server error",
        details=str(exc) or type(exc).__name__,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
