from fastapi import APIRouter, Depends, HTTPException, Request
from eventora.auth import get_current_user
from eventora.cache import cache
from eventora.core.config import settings
from eventora.core.http import get_http_client
from eventora.core.logging import logger
from eventora.core.rate_limit import limiter
from eventora.schemas import (
    ApiResponse,
    GenerateBannerRequest,
    GenerateEventRequest,
    GeneratedBanner,
    GeneratedEvent,
    MessageResponse,
    TrackDownloadRequest,
)
from eventora.services.ai_service import AIService
from eventora.services.banner_service import BannerService
from eventora.services.llm_service import GeminiService
from eventora.services.unsplash_service import UnsplashService

router = APIRouter(prefix="/ai", tags=["ai"])

# The SDK client inside is created lazily and reused across requests
llm_service = GeminiService(api_key=settings.GEMINI_API_KEY)


def get_ai_service() -> AIService:
    client = get_http_client()
    return AIService(
        llm=llm_service,
        images=UnsplashService(client, access_key=settings.UNSPLASH_ACCESS_KEY),
        banners=BannerService(client, cache, api_key=settings.HUGGINGFACE_API_KEY),
        cache=cache,
    )


@router.post("/generate-event", response_model=ApiResponse[GeneratedEvent], response_model_exclude_none=True)
@limiter.limit(settings.AI_RATE_LIMIT)
async def generate_event_endpoint(
    request: Request,
    payload: GenerateEventRequest,
    ai_service: AIService = Depends(get_ai_service)
):
    """
    Draft an event from a natural-language description.

    The draft carries candidate cover images and, when the image model is
    available, a generated banner. ``fallback`` is true when the language
    model could not be used.
    """
    logger.info(f"Received AI generation request: \"{payload.prompt[:50]}...\"")
    generated = await ai_service.generate_event(payload.prompt.strip())
    return ApiResponse(data=GeneratedEvent.model_validate(generated))


@router.post("/generate-banner", response_model=ApiResponse[GeneratedBanner])
async def generate_banner_endpoint(
    payload: GenerateBannerRequest,
    ai_service: AIService = Depends(get_ai_service)
):
    banner = await ai_service.generate_banner(payload.title, payload.description, payload.keywords)
    if not banner:
        raise HTTPException(status_code=500, detail="Failed to generate banner. Please try again.")
    return ApiResponse(data=GeneratedBanner.model_validate(banner))


@router.post("/track-download", response_model=MessageResponse)
async def track_download_endpoint(
    payload: TrackDownloadRequest,
    user=Depends(get_current_user),
    ai_service: AIService = Depends(get_ai_service)
):
    """Record use of a cover image picked from the generated draft."""
    await ai_service.track_image_download(payload.download_url)
    return MessageResponse(message="Download tracked")
