from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

HOUR = 60 * 60


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    # App Settings
    APP_NAME: str = "Islamic Companion API"
    APP_URL: str = "http://localhost:8000"
    PROJECT_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: str = "*"  # Comma-separated string or "*"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = False
    RATE_LIMIT_DEFAULT: str = "120/minute"

    DATABASE_URL: str = "sqlite+aiosqlite:///./companion.db"
    CACHE_TYPE: str = "inmemory"  # inmemory or redis
    REDIS_URL: str | None = None

    # Identity provider tokens are verified, never issued, here
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Upstreams
    ALADHAN_BASE_URL: str = "https://api.aladhan.com/v1"
    HADITH_CDN_BASE_URL: str = "https://cdn.jsdelivr.net/gh/fawazahmed0/hadith-api@1"
    TAFSIR_BASE_URL: str = "https://quranenc.com/api/v1/translation/sura"
    ADHKAR_BASE_URL: str = "https://www.hisnmuslim.com/api"
    QURAN_BASE_URL: str = "https://api.alquran.cloud/v1/quran"
    UPSTREAM_RETRY_ATTEMPTS: int = 3
    UPSTREAM_TIMEOUT_SECONDS: float = 15.0
    UPSTREAM_RETRY_BASE_DELAY: float = 0.5  # seconds, multiplied by attempt number

    # Proxy cache TTLs (seconds)
    CALENDAR_CACHE_TTL: int = 12 * HOUR
    CONVERT_CACHE_TTL: int = 24 * HOUR
    HADITH_CACHE_TTL: int = 24 * HOUR
    TAFSIR_CACHE_TTL: int = 24 * HOUR
    FEATURED_STORY_CACHE_TTL: int = 1 * HOUR
    ADHKAR_CACHE_TTL: int = 24 * HOUR
    QURAN_CACHE_TTL: int = 24 * HOUR

    # Adhkar category menus, one `"TITLE": ...` / `"TEXT": <url>` pair per entry
    ADHKAR_AR_LIST_PATH: str = "api list.txt"
    ADHKAR_EN_LIST_PATH: str = "en api list.txt"

    # Parse ALLOWED_ORIGINS
    @property
    def allowed_origins_list(self) -> List[str]:
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def secret_key_valid(self) -> bool:
        return bool(self.SECRET_KEY and self.SECRET_KEY != "your-secret-key")


settings = Settings()

# Validate SECRET_KEY on import
if not settings.secret_key_valid:
    raise ValueError(
        "SECRET_KEY must be set in .env (run python generate_secret.py to generate one)."
    )
