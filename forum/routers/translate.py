"""Translation endpoints: ad-hoc translation and cache/queue statistics."""

from fastapi import APIRouter, Depends

from forum.modules.translate import TranslationService, get_translation_service
from forum.modules.translate.schemas import (
    TranslateRequest,
    TranslateResponse,
    TranslationStats,
)

router = APIRouter(prefix="/translate", tags=["Translation"])


@router.post("", response_model=TranslateResponse)
async def translate_content(
    payload: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
):
    cached = service.is_cached(payload)
    is_english, translated_content = await service.translate(payload)
    return TranslateResponse(
        is_english=is_english,
        translated_content=translated_content,
        cached=cached,
    )


@router.get("/status", response_model=TranslationStats)
def translation_status(
    service: TranslationService = Depends(get_translation_service),
):
    return TranslationStats(**service.stats())
