"""Translation of post content through the external translator microservice."""

from .cache import TranslationCache
from .client import TranslatorClient
from .fingerprint import content_of, fingerprint
from .queue import SingleFlightQueue
from .schemas import FALLBACK_OUTCOME, TranslationOutcome
from .service import (
    TranslationService,
    build_translation_service,
    get_translation_service,
)

__all__ = [
    "FALLBACK_OUTCOME",
    "SingleFlightQueue",
    "TranslationCache",
    "TranslationOutcome",
    "TranslationService",
    "TranslatorClient",
    "build_translation_service",
    "content_of",
    "fingerprint",
    "get_translation_service",
]
