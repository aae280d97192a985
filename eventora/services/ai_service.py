"""
Event-generation pipeline.

A free-text prompt goes to the LLM, the JSON object in its reply is
extracted and completed with defaults, then stock photos and an AI banner
are fetched concurrently and merged into the draft. Successful drafts are
cached per prompt; any LLM failure degrades to a fallback draft.
"""
import asyncio
import json
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from eventora.core.config import settings
from eventora.core.logging import logger
from eventora.services.banner_service import BannerService
from eventora.services.llm_service import GeminiService, LLMServiceError
from eventora.services.unsplash_service import UnsplashService

DEFAULT_CATEGORIES = ["Technology", "Networking", "Conference"]
DEFAULT_KEYWORDS = ["event", "conference", "networking", "professional", "innovation"]
FALLBACK_KEYWORDS = ["event", "conference", "technology", "networking", "innovation"]
DEFAULT_LOCATION = {"city": "San Francisco", "country": "USA", "location_type": "physical"}
LOCATION_TYPES = {"physical", "virtual", "hybrid"}
DEFAULT_DURATION_HOURS = 4
DEFAULT_CAPACITY = 100
DEFAULT_LEAD_DAYS = 90
COVER_IMAGE_COUNT = 5

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class GenerationError(Exception):
    """The LLM reply could not be turned into an event draft."""


def build_generation_prompt(user_prompt: str) -> str:
    return (
        f"For: \"{user_prompt}\"\n\n"
        "Generate ONLY valid JSON (no markdown):\n"
        '{"title":"event name","description":"brief 1-2 sentence description (max 100 words)",'
        '"categories":["cat1","cat2"],'
        '"suggestedLocation":{"city":"City","country":"Country","locationType":"physical"},'
        '"suggestedDate":"2024-12-15T10:00:00Z","estimatedDuration":4,"suggestedCapacity":100,'
        '"keywords":["kw1","kw2","kw3"]}\n\n'
        "Keep description concise. Return JSON only:"
    )


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of a free-text LLM reply.

    Markdown fences are removed, then the widest ``{...}`` span is parsed.

    Raises:
        GenerationError: If no object is present or it does not parse
    """
    cleaned = _FENCE_RE.sub("", (text or "").strip())

    match = _OBJECT_RE.search(cleaned)
    if match:
        candidate = match.group(0)
    else:
        first, last = cleaned.find("{"), cleaned.rfind("}")
        if first == -1 or last <= first:
            raise GenerationError("No valid JSON found in AI response")
        candidate = cleaned[first:last + 1]

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise GenerationError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise GenerationError("AI response is not a JSON object")
    return data


def _default_date(now: datetime) -> str:
    return (now + timedelta(days=DEFAULT_LEAD_DAYS)).isoformat().replace("+00:00", "Z")


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _positive_number(value: Any, default, cast):
    try:
        if not math.isfinite(float(value)):
            return default
        number = cast(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


def _valid_date(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def normalize_generated_event(data: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Validate the LLM's object and fill every optional field with a default.

    Returns:
        Draft dict with snake_case keys

    Raises:
        GenerationError: If title or description is missing
    """
    now = now or datetime.now(timezone.utc)

    title = data.get("title")
    description = data.get("description")
    if not isinstance(title, str) or not title.strip() or not isinstance(description, str) or not description.strip():
        raise GenerationError("AI response missing required fields")

    location = data.get("suggestedLocation")
    if isinstance(location, dict):
        location_type = location.get("locationType")
        suggested_location = {
            "city": str(location.get("city") or DEFAULT_LOCATION["city"]),
            "country": str(location.get("country") or DEFAULT_LOCATION["country"]),
            "location_type": location_type if location_type in LOCATION_TYPES else "physical",
        }
    else:
        suggested_location = dict(DEFAULT_LOCATION)

    suggested_date = data.get("suggestedDate")

    return {
        "title": title.strip(),
        "description": description.strip(),
        "categories": _string_list(data.get("categories")) or list(DEFAULT_CATEGORIES),
        "suggested_location": suggested_location,
        "suggested_date": suggested_date.strip() if _valid_date(suggested_date) else _default_date(now),
        "estimated_duration": _positive_number(data.get("estimatedDuration"), DEFAULT_DURATION_HOURS, float),
        "suggested_capacity": _positive_number(data.get("suggestedCapacity"), DEFAULT_CAPACITY, int),
        "keywords": _string_list(data.get("keywords")) or list(DEFAULT_KEYWORDS),
    }


def fallback_event(user_prompt: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Draft returned when the LLM is unavailable; built only from the prompt."""
    now = now or datetime.now(timezone.utc)
    return {
        "title": f"Event: {user_prompt[:50]}",
        "description": (
            f"This is a demonstration event generated from your prompt: \"{user_prompt}\". "
            "The AI service encountered an issue, so default details were filled in."
        ),
        "categories": list(DEFAULT_CATEGORIES),
        "suggested_location": dict(DEFAULT_LOCATION),
        "suggested_date": _default_date(now),
        "estimated_duration": DEFAULT_DURATION_HOURS,
        "suggested_capacity": DEFAULT_CAPACITY,
        "keywords": list(FALLBACK_KEYWORDS),
    }


class AIService:
    def __init__(
        self,
        llm: GeminiService,
        images: UnsplashService,
        banners: BannerService,
        cache,
        ttl: Optional[int] = None,
    ):
        self.llm = llm
        self.images = images
        self.banners = banners
        self.cache = cache
        self.ttl = ttl or settings.AI_CACHE_TTL

    @staticmethod
    def prompt_cache_key(user_prompt: str) -> str:
        return f"ai:prompt:{user_prompt.lower().strip()}"

    async def generate_event_details(self, user_prompt: str) -> Dict[str, Any]:
        """
        Turn the prompt into a normalised draft, from cache when possible.

        Returns:
            Draft dict with a ``fallback`` flag
        """
        cache_key = self.prompt_cache_key(user_prompt)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.info("Returning cached AI response")
            return cached

        logger.info(f"Generating event from prompt: \"{user_prompt[:50]}...\"")
        try:
            reply = await self.llm.generate(build_generation_prompt(user_prompt))
            draft = normalize_generated_event(extract_json_object(reply))
        except (LLMServiceError, GenerationError) as e:
            logger.warning(f"Using fallback event draft: {e}")
            draft = fallback_event(user_prompt)
            draft["fallback"] = True
            return draft

        draft["fallback"] = False
        await self.cache.set(cache_key, draft, self.ttl)
        logger.info(f"Event generated successfully: \"{draft['title']}\"")
        return draft

    async def generate_event(self, user_prompt: str) -> Dict[str, Any]:
        """Full pipeline: draft, then cover images and banner in parallel."""
        draft = await self.generate_event_details(user_prompt)

        cover_images, banner = await asyncio.gather(
            self.images.search_event_images(draft["keywords"], COVER_IMAGE_COUNT),
            self.banners.generate_event_banner(draft["title"], draft["description"], draft["keywords"]),
        )

        result = dict(draft)
        result["cover_images"] = cover_images
        if banner:
            result["ai_generated_banner"] = banner
        return result

    async def generate_banner(self, title: str, description: str, keywords: List[str]) -> Optional[dict]:
        return await self.banners.generate_event_banner(title, description, keywords)

    async def track_image_download(self, download_url: str) -> bool:
        return await self.images.track_download(download_url)

    async def clear_cache(self) -> int:
        cleared = await self.cache.delete_pattern("ai:*")
        logger.info(f"Prompt cache cleared ({cleared} entries)")
        return cleared
