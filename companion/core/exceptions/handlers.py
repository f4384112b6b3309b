from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import traceback

from companion.core.exceptions.errors import (
    InvalidProfileUpdateError,
    OfflineError,
    ProfileNotFoundError,
    SyncError,
    UpstreamError,
)
from companion.core.responses import send_error
from companion.utils.logging import get_logger, get_upstream_logger


def register_exception_handlers(app):
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger = get_logger()
        logger.error(
            f"Unhandled exception for {request.method} {request.url}: {exc}\n"
            f"Traceback: {traceback.format_exc()}\n"
            f"User-Agent: {request.headers.get('user-agent')}"
        )
        return send_error(
            "Server error",
            details=str(exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        logger = get_logger()
        raw_errors = exc.errors()
        logger.warning(
            f"Validation error for {request.method} {request.url}: {raw_errors}"
        )

        friendly_errors = {}
        for error in raw_errors:
            field = ".".join(map(str, error["loc"]))
            if field.startswith("body."):
                field = field.replace("body.", "")
            friendly_errors[field] = error["msg"]

        return send_error(
            "Invalid request",
            details=friendly_errors,
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(UpstreamError)
    async def upstream_exception_handler(request: Request, exc: UpstreamError):
        get_upstream_logger().warning(
            f"Upstream {exc.url} answered {exc.status} for {request.method} {request.url}"
        )
        return send_error(
            str(exc),
            details=exc.body or None,
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    @app.exception_handler(ProfileNotFoundError)
    async def profile_not_found_handler(request: Request, exc: ProfileNotFoundError):
        logger = get_logger()
        logger.warning(f"Profile not found for {request.method} {request.url}")
        return send_error(str(exc), status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(InvalidProfileUpdateError)
    async def invalid_profile_update_handler(
        request: Request, exc: InvalidProfileUpdateError
    ):
        logger = get_logger()
        logger.warning(f"Rejected profile write for {request.method} {request.url}: {exc}")
        return send_error(
            "Invalid profile update", status_code=status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(SyncError)
    async def sync_exception_handler(request: Request, exc: SyncError):
        logger = get_logger()
        logger.warning(f"Sync error for {request.method} {request.url}: {exc}")
        code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if isinstance(exc, OfflineError)
            else status.HTTP_409_CONFLICT
        )
        return send_error(str(exc), status_code=code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger = get_logger()
        logger.warning(
            f"HTTP {exc.status_code} for {request.method} {request.url}: {exc.detail}"
        )
        return send_error(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )
