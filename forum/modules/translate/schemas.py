"""Pydantic schemas and value types for the translation pipeline."""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr


class TranslationOutcome(NamedTuple):
    """Result handed to callers; unpacks as `(is_english, translated_content)`."""

    is_english: bool
    translated_content: str


# Returned whenever the translator cannot be reached or answers with garbage.
FALLBACK_OUTCOME = TranslationOutcome(True, "")


class TranslatorResponse(BaseModel):
    """Shape the translator microservice must answer with."""

    model_config = ConfigDict(extra="ignore")

    is_english: StrictBool
    translated_content: StrictStr

    def to_outcome(self) -> TranslationOutcome:
        return TranslationOutcome(self.is_english, self.translated_content)


class TranslateRequest(BaseModel):
    content: str


class TranslateResponse(BaseModel):
    is_english: bool
    translated_content: str
    cached: bool


class TranslationStats(BaseModel):
    cache_size: int
    cache_max_entries: int
    cache_ttl_seconds: float
    cache_hits: int
    cache_misses: int
    queue_pending: int
    queue_running: int
    queue_concurrency: int


__all__ = [
    "FALLBACK_OUTCOME",
    "TranslateRequest",
    "TranslateResponse",
    "TranslationOutcome",
    "TranslationStats",
    "TranslatorResponse",
]
