import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-suite")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "companion-test-logs"))
os.environ["RATE_LIMIT_ENABLED"] = "false"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from companion.core.config import settings
from companion.core.dependencies import (
    get_caches,
    get_overlay_service,
    get_profile_store,
    get_upstream,
)
from companion.core.security import create_identity_token
from companion.db.session import build_engine, build_sessionmaker, init_db
from companion.services.overlays import OverlayContentService
from companion.services.profile_store import ProfileStore
from companion.services.upstream import UpstreamClient
from companion.utils.caching import InMemoryBackend, build_caches
from main import app


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeUpstream:
    """Routes upstream URLs to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, url, *outcomes):
        """Each outcome is ``(status, json_body)``, ``(status, "text")`` or an exception.

        Outcomes are consumed in order; the last one repeats.
        """
        self.routes[str(httpx.URL(url))] = list(outcomes)

    def count(self, url) -> int:
        return self.calls.count(str(httpx.URL(url)))

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        queued = self.routes.get(url)
        if not queued:
            return httpx.Response(404, json={"error": "not stubbed"})
        outcome = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(outcome, Exception):
            raise outcome
        status_code, body = outcome
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_upstream():
    return FakeUpstream()


@pytest.fixture
def upstream(fake_upstream, sleeps):
    async def no_sleep(delay):
        sleeps.append(delay)

    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_upstream.handler))
    return UpstreamClient(
        client,
        attempts=settings.UPSTREAM_RETRY_ATTEMPTS,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        base_delay=settings.UPSTREAM_RETRY_BASE_DELAY,
        sleep=no_sleep,
    )


@pytest.fixture
def caches(clock):
    return build_caches(settings, backend=InMemoryBackend(), clock=clock)


@pytest.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await init_db(engine)
    yield build_sessionmaker(engine)
    await engine.dispose()


@pytest.fixture
def profile_store(session_factory):
    return ProfileStore(session_factory)


@pytest.fixture
def overlay_service(session_factory):
    return OverlayContentService(session_factory)


@pytest.fixture
def client(caches, upstream, profile_store, overlay_service):
    """TestClient wired to in-memory caches, a mock upstream and a temp database."""
    app.dependency_overrides[get_caches] = lambda: caches
    app.dependency_overrides[get_upstream] = lambda: upstream
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    app.dependency_overrides[get_overlay_service] = lambda: overlay_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def token():
    return create_identity_token("user-1", email="amina@example.com", name="Amina")


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
