"""Environment-aware settings loader."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict, Type

from .settings import Settings


class DevelopmentSettings(Settings):
    """Settings tuned for local development (verbose errors, permissive CORS)."""

    environment: str = "development"


class ProductionSettings(Settings):
    """Settings tuned for production."""

    environment: str = "production"


class TestSettings(Settings):
    """Settings tuned for automated tests (short translator timeout, plain console logs)."""

    environment: str = "test"
    use_json_logs: bool = False
    translator_timeout_seconds: float = 1.0


ENVIRONMENTS: Dict[str, Type[Settings]] = {
    "development": DevelopmentSettings,
    "dev": DevelopmentSettings,
    "production": ProductionSettings,
    "prod": ProductionSettings,
    "test": TestSettings,
    "testing": TestSettings,
}


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance keyed by APP_ENV to avoid repeated disk/env reads."""
    env = os.getenv("APP_ENV", "production").lower()
    settings_cls = ENVIRONMENTS.get(env, ProductionSettings)
    return settings_cls()
