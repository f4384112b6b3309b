import asyncio
from typing import Any, Awaitable, Callable, Optional

import httpx

from companion.core.exceptions.errors import UpstreamError
from companion.utils.logging import get_upstream_logger

logger = get_upstream_logger()

ACCEPT_JSON = {"Accept": "application/json"}

# Transport-level failures: connection errors, per-attempt timeouts
NETWORK_FAILURES = (httpx.HTTPError, asyncio.TimeoutError)

# A 2xx whose body is not JSON
PARSE_FAILURES = (ValueError,)

Sleep = Callable[[float], Awaitable[Any]]


async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    attempts: int = 3,
    timeout: float = 15.0,
    base_delay: float = 0.5,
    sleep: Sleep = asyncio.sleep,
) -> httpx.Response:
    """
    GET ``url`` up to ``attempts`` times with linear backoff.

    Each attempt is bounded by ``timeout`` seconds and its in-flight request is
    cancelled when that elapses. Every non-2xx status counts as a failure.
    Between attempts the fetcher sleeps ``base_delay * (i + 1)`` seconds; it
    does not sleep after the last one. Raises the last recorded error.
    """
    last_error: Optional[Exception] = None

    for i in range(attempts):
        try:
            response = await asyncio.wait_for(
                client.get(url, headers=ACCEPT_JSON, timeout=None), timeout=timeout
            )
            if response.is_success:
                return response
            last_error = UpstreamError(response.status_code, response.text, url)
        except NETWORK_FAILURES as exc:
            last_error = exc

        logger.warning(f"Attempt {i + 1}/{attempts} for {url} failed: {last_error!r}")
        if i < attempts - 1:
            await sleep(base_delay * (i + 1))

    raise last_error or UpstreamError(0, "Failed to fetch upstream", url)


class UpstreamClient:
    """Shared httpx client plus the retry policy used by the proxy routes."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        attempts: int = 3,
        timeout: float = 15.0,
        base_delay: float = 0.5,
        sleep: Sleep = asyncio.sleep,
    ):
        self._client = client
        self.attempts = attempts
        self.timeout = timeout
        self.base_delay = base_delay
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings, client: httpx.AsyncClient | None = None):
        return cls(
            client or httpx.AsyncClient(),
            attempts=settings.UPSTREAM_RETRY_ATTEMPTS,
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            base_delay=settings.UPSTREAM_RETRY_BASE_DELAY,
        )

    async def get_json(self, url: str) -> Any:
        """Single fetch, bounded only by the client's default timeout."""
        response = await self._client.get(url, headers=ACCEPT_JSON)
        if not response.is_success:
            logger.warning(f"Upstream {url} answered {response.status_code}")
            raise UpstreamError(response.status_code, response.text, url)
        return response.json()

    async def get_json_with_retry(self, url: str) -> Any:
        response = await fetch_with_retry(
            self._client,
            url,
            attempts=self.attempts,
            timeout=self.timeout,
            base_delay=self.base_delay,
            sleep=self._sleep,
        )
        return response.json()

    async def close(self):
        await self._client.aclose()
