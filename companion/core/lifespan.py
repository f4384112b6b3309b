from contextlib import asynccontextmanager
from fastapi import FastAPI

from companion.core.config import settings
from companion.db.session import build_engine, build_sessionmaker, init_db
from companion.services.overlays import OverlayContentService
from companion.services.profile_store import ProfileStore
from companion.services.upstream import UpstreamClient
from companion.utils.caching import build_caches
from companion.utils.logging import get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger = get_logger()
    engine = build_engine(settings.DATABASE_URL)
    await init_db(engine)
    session_factory = build_sessionmaker(engine)

    app.state.caches = build_caches(settings)
    app.state.upstream = UpstreamClient.from_settings(settings)
    app.state.profile_store = ProfileStore(session_factory)
    app.state.overlays = OverlayContentService(session_factory)
    logger.info(f"Startup: {app.title} v{app.version} starting...")
    yield
    # Shutdown
    await app.state.upstream.close()
    await app.state.caches.close()
    await engine.dispose()
    logger.info("Shutdown: App shutting down...")
