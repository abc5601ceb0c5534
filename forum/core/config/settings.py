"""Application settings loaded from environment with safe fallbacks.

Environment precedence:
- Loads `.env` from the repo root before reading process env vars.
- Most values are pulled straight from env; booleans go through `_env_flag` so `"0"/"false"` work.
- CORS is normalized from `CORS_ORIGINS` (comma-separated) with a conservative default allowlist.

Key expectations (defaults in parentheses):
- `APP_ENV` controls settings class selection (`production` default).
- Database: `DATABASE_URL` (local sqlite file when unset).
- Translator: `TRANSLATOR_API_URL`, `TRANSLATOR_TIMEOUT_SECONDS` (35),
  `TRANSLATOR_CONCURRENCY` (1).
- Translation cache: `TRANSLATION_CACHE_MAX_ENTRIES` (500),
  `TRANSLATION_CACHE_TTL_SECONDS` (3600).
"""

import logging
import os
from pathlib import Path
from typing import ClassVar, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Base directory of the project; used for resolving relative paths reliably.
# (__file__ is forum/core/config/settings.py, so we need to traverse three levels up)
BASE_DIR = Path(__file__).resolve().parents[3]


load_dotenv(BASE_DIR / ".env")

logger = logging.getLogger(__name__)


def _env_flag(name: str, *, default: Optional[bool] = False) -> Optional[bool]:
    """
    Helper to parse boolean-like environment variables.
    """
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Behavior highlights:
    - Loads `.env` at repo root, then lets process env override.
    - Feature toggles parsed via `_env_flag` to accept common truthy/falsey strings.
    - Translator endpoint is trimmed of trailing slashes once so request URLs stay stable.
    - CORS normalized once to avoid mutation side effects in settings instances.
    """

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = os.getenv("APP_ENV", "production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: Optional[str] = os.getenv("LOG_DIR")
    use_json_logs: bool = _env_flag("USE_JSON_LOGS", default=True)
    cors_origins: list[str] = []

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./forum.db")

    translator_api_url: str = os.getenv(
        "TRANSLATOR_API_URL", "http://localhost:5000"
    )
    translator_timeout_seconds: float = float(
        os.getenv("TRANSLATOR_TIMEOUT_SECONDS", "35")
    )
    translator_concurrency: int = int(os.getenv("TRANSLATOR_CONCURRENCY", 1))
    translation_cache_max_entries: int = int(
        os.getenv("TRANSLATION_CACHE_MAX_ENTRIES", 500)
    )
    translation_cache_ttl_seconds: int = int(
        os.getenv("TRANSLATION_CACHE_TTL_SECONDS", 3600)
    )

    track_ip_per_post: bool = bool(_env_flag("TRACK_IP_PER_POST", default=False))
    MAX_ROOMS_PER_SOCKET: int = int(os.getenv("MAX_ROOMS_PER_SOCKET", 50))

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        env_override = os.getenv("APP_ENV")
        if env_override:
            object.__setattr__(self, "environment", env_override)

        object.__setattr__(
            self, "translator_api_url", self.translator_api_url.rstrip("/")
        )
        if self.translator_concurrency < 1:
            logger.warning(
                "TRANSLATOR_CONCURRENCY=%s is invalid; falling back to 1",
                self.translator_concurrency,
            )
            object.__setattr__(self, "translator_concurrency", 1)

        cors_env = os.getenv("CORS_ORIGINS")
        if cors_env:
            origins = [
                origin.strip() for origin in cors_env.split(",") if origin.strip()
            ]
        elif self.cors_origins:
            origins = self.cors_origins
        else:
            origins = [
                "https://example.com",
                "https://www.example.com",
            ]
        object.__setattr__(self, "cors_origins", origins)
