"""
Shared outbound HTTP client for the image providers.
"""
from typing import Optional
import httpx

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=5.0)

_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT, follow_redirects=True)
    return _client


async def close_http_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
