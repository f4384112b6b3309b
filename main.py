from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion.api.router import router as api_router
from companion.core.config import settings
from companion.core.exceptions.handlers import register_exception_handlers
from companion.core.lifespan import lifespan
from companion.core.logging import setup_early_logging
from companion.core.middlewares import LogRequestsMiddleware
from companion.core.openapi import custom_openapi
from companion.core.rate_limiting import setup_rate_limiting

# Setup early logging for startup errors
setup_early_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.PROJECT_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "aladhan", "description": "Hijri/Gregorian calendar proxy"},
        {"name": "hadith", "description": "Hadith collections proxy"},
        {"name": "tafsir", "description": "Quran tafsir proxy"},
        {"name": "quran", "description": "Quran text proxy"},
        {"name": "adhkar", "description": "Hisn al-Muslim adhkar proxy"},
        {"name": "stories", "description": "Islamic history stories"},
        {"name": "overlays", "description": "Prayer overlay content"},
        {"name": "profile", "description": "User profile and real-time sync"},
    ],
)

app.openapi = lambda: custom_openapi(app)

setup_rate_limiting(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(LogRequestsMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.PROJECT_VERSION}
