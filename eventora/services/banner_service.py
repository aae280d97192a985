"""
AI banner generation with Stable Diffusion XL on the Hugging Face inference API.
"""
import base64
from typing import List, Optional
import httpx
from eventora.core.config import settings
from eventora.core.logging import logger

BANNER_SOURCE = "huggingface-sdxl"
NEGATIVE_PROMPT = "text, words, letters, watermark, low quality, blurry"
GENERATION_TIMEOUT = 120.0


def build_banner_prompt(title: str, description: str, keywords: List[str]) -> str:
    return (
        f"Professional event banner for \"{title}\". {description[:100]}. "
        f"Modern, vibrant, high-quality digital art, professional design, "
        f"{', '.join(keywords[:3])}, landscape orientation, no text"
    )


class BannerService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        cache,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        ttl: Optional[int] = None,
    ):
        self.client = client
        self.cache = cache
        self.api_key = api_key
        self.api_url = (api_url or settings.HUGGINGFACE_API_URL).rstrip("/")
        self.model = model or settings.HUGGINGFACE_MODEL
        self.ttl = ttl or settings.AI_CACHE_TTL

    async def generate_event_banner(self, title: str, description: str, keywords: List[str]) -> Optional[dict]:
        """
        Generate a banner image for an event.

        Returns:
            ``{"image_data", "prompt", "source"}`` with base64 PNG data, or None
            when the provider is not configured or the call fails
        """
        if not self.api_key:
            logger.warning("HUGGINGFACE_API_KEY not set, skipping banner generation")
            return None

        prompt = build_banner_prompt(title, description, keywords)

        cache_key = f"ai:banner:{title.lower().strip()}"
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.info("Returning cached banner")
            return cached

        logger.info(f"Generating event banner with Hugging Face for: \"{title}\"")
        try:
            response = await self.client.post(
                f"{self.api_url}/{self.model}",
                json={
                    "inputs": prompt,
                    "parameters": {
                        "negative_prompt": NEGATIVE_PROMPT,
                        "num_inference_steps": 30,
                        "guidance_scale": 7.5,
                    },
                },
                headers={"Authorization": f"Bearer {self.api_key}", "Accept": "image/png"},
                timeout=GENERATION_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Hugging Face API error: {e}")
            return None

        if not response.headers.get("content-type", "").startswith("image/") or not response.content:
            logger.error(f"Unexpected response type from Hugging Face API: {response.headers.get('content-type')}")
            return None

        result = {
            "image_data": base64.b64encode(response.content).decode("ascii"),
            "prompt": prompt,
            "source": BANNER_SOURCE,
        }
        await self.cache.set(cache_key, result, self.ttl)

        logger.info(f"Banner generated successfully for \"{title}\"")
        return result
