"""
Stock-photo search for event cover images (Unsplash).
"""
from typing import List, Optional
import httpx
from eventora.core.config import settings
from eventora.core.logging import logger

SEARCH_TIMEOUT = 5.0


def placeholder_images(keyword: str, count: int) -> List[dict]:
    """Unauthenticated placeholder images used when the search API is unavailable."""
    return [
        {
            "id": f"placeholder-{i}",
            "url": f"https://source.unsplash.com/1200x600/?{keyword},event",
            "thumb": f"https://source.unsplash.com/400x300/?{keyword},event",
            "photographer": "Unsplash",
            "photographer_url": "https://unsplash.com",
            "alt": f"{keyword} event",
            "download_url": "",
        }
        for i in range(count)
    ]


class UnsplashService:
    def __init__(self, client: httpx.AsyncClient, access_key: Optional[str] = None, base_url: Optional[str] = None):
        self.client = client
        self.access_key = access_key
        self.base_url = (base_url or settings.UNSPLASH_API_URL).rstrip("/")

    def _headers(self) -> dict:
        return {"Authorization": f"Client-ID {self.access_key}"}

    async def search_event_images(self, keywords: List[str], count: int = 5) -> List[dict]:
        """
        Search landscape photos matching the keywords.

        Args:
            keywords: Search terms, joined into one query
            count: Number of images to return

        Returns:
            List of image dicts; placeholders when the API is unreachable
        """
        query = " ".join(keywords)
        fallback_keyword = keywords[0] if keywords else "event"

        if not self.access_key:
            logger.warning("UNSPLASH_ACCESS_KEY not set, using placeholder images")
            return placeholder_images(fallback_keyword, count)

        logger.info(f"Searching Unsplash for: \"{query}\"")
        try:
            response = await self.client.get(
                f"{self.base_url}/search/photos",
                params={
                    "query": query,
                    "per_page": count,
                    "orientation": "landscape",
                    "content_filter": "high",
                },
                headers=self._headers(),
                timeout=SEARCH_TIMEOUT,
            )
            response.raise_for_status()
            photos = response.json()["results"]
            images = [
                {
                    "id": photo["id"],
                    "url": photo["urls"]["regular"],
                    "thumb": photo["urls"]["thumb"],
                    "photographer": photo["user"]["name"],
                    "photographer_url": photo["user"]["links"]["html"],
                    "alt": photo.get("alt_description") or f"Event image related to {query}",
                    "download_url": photo.get("links", {}).get("download_location") or "",
                }
                for photo in photos
            ]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Unsplash API error: {e}")
            logger.warning("Using placeholder images due to API error")
            return placeholder_images(fallback_keyword, count)

        logger.info(f"Found {len(images)} images from Unsplash")
        return images

    def _is_api_url(self, url: str) -> bool:
        try:
            target, api = httpx.URL(url), httpx.URL(self.base_url)
        except (httpx.InvalidURL, TypeError):
            return False
        return target.scheme == api.scheme and target.host == api.host and target.port == api.port

    async def track_download(self, download_url: str) -> bool:
        """
        Notify Unsplash that a photo was used, as its API guidelines require.

        Only ``download_location`` links on the configured API host are
        followed; anything else is refused without a request.
        """
        if not download_url:
            return False
        if not self._is_api_url(download_url):
            logger.warning(f"Refusing to track download outside the Unsplash API: {download_url[:100]}")
            return False
        try:
            response = await self.client.get(download_url, headers=self._headers(), follow_redirects=False)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to track image download: {e}")
            return False
        logger.info("Image download tracked")
        return True
