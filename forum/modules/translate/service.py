"""Translation orchestration: fingerprint, cache lookup, queued backend call, fallback.

`TranslationService.translate` never raises for translator trouble. Timeouts, transport
errors and malformed answers all resolve to `FALLBACK_OUTCOME` (treat as English, no
translation) and are not cached. Anything else, such as missing content or a broken
cache, propagates to the caller.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from forum.core.config import Settings, settings as app_settings
from forum.core.exceptions import ExternalServiceException

from .cache import TranslationCache
from .client import TranslatorClient
from .fingerprint import content_of, fingerprint
from .queue import SingleFlightQueue
from .schemas import FALLBACK_OUTCOME, TranslationOutcome

logger = logging.getLogger(__name__)


class TranslationService:
    """Owns the translation cache and the single-flight queue in front of the translator."""

    def __init__(
        self,
        client: TranslatorClient,
        *,
        cache: Optional[TranslationCache] = None,
        queue: Optional[SingleFlightQueue] = None,
    ) -> None:
        self.client = client
        self.cache = cache or TranslationCache()
        self.queue = queue or SingleFlightQueue(concurrency=1)

    def is_cached(self, post_like: Any) -> bool:
        """Return True when a live translation exists for the content (no TTL refresh)."""
        return self.cache.has(fingerprint(content_of(post_like)))

    async def translate(self, post_like: Any) -> TranslationOutcome:
        content = content_of(post_like)
        key = fingerprint(content)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Translation cache hit", extra={"fingerprint": key})
            return cached

        logger.debug("Translation cache miss; queueing", extra={"fingerprint": key})
        return await self.queue.submit(lambda: self._call_backend(content, key))

    async def _call_backend(self, content: str, key: str) -> TranslationOutcome:
        try:
            outcome = await self.client.fetch(content)
        except ExternalServiceException as exc:
            if exc.timed_out:
                logger.warning(
                    "[translator] %s", exc.message, extra={"fingerprint": key}
                )
            else:
                logger.error(
                    "[translator] Translation failed: %s",
                    exc.message,
                    extra={"fingerprint": key},
                )
            return FALLBACK_OUTCOME

        self.cache.set(key, outcome)
        return outcome

    def stats(self) -> dict:
        return {**self.cache.stats(), **self.queue.stats()}

    async def aclose(self) -> None:
        await self.client.aclose()


def build_translation_service(config: Settings) -> TranslationService:
    """Wire a service from settings."""
    return TranslationService(
        TranslatorClient(
            config.translator_api_url, timeout=config.translator_timeout_seconds
        ),
        cache=TranslationCache(
            max_entries=config.translation_cache_max_entries,
            ttl_seconds=config.translation_cache_ttl_seconds,
        ),
        queue=SingleFlightQueue(concurrency=config.translator_concurrency),
    )


@lru_cache
def get_translation_service() -> TranslationService:
    """Process-wide service instance (FastAPI dependency)."""
    return build_translation_service(app_settings)


__all__ = [
    "TranslationService",
    "build_translation_service",
    "get_translation_service",
]
