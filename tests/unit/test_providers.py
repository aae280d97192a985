"""
Unit tests for the image providers, driven through httpx.MockTransport.
"""
import base64
import httpx
import pytest

from eventora.cache.memory_cache import MemoryCache
from eventora.services.banner_service import BannerService, build_banner_prompt
from eventora.services.unsplash_service import UnsplashService, placeholder_images

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"

UNSPLASH_RESULT = {
    "results": [
        {
            "id": "abc123",
            "urls": {"regular": "https://images.unsplash.com/abc-regular", "thumb": "https://images.unsplash.com/abc-thumb"},
            "user": {"name": "Jane Doe", "links": {"html": "https://unsplash.com/@jane"}},
            "alt_description": "people at a conference",
            "links": {"download_location": "https://api.unsplash.com/photos/abc123/download"},
        },
        {
            "id": "def456",
            "urls": {"regular": "https://images.unsplash.com/def-regular", "thumb": "https://images.unsplash.com/def-thumb"},
            "user": {"name": "John Roe", "links": {"html": "https://unsplash.com/@john"}},
            "alt_description": None,
            "links": {},
        },
    ]
}


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.asyncio
class TestUnsplashService:
    """Test stock-photo search and download tracking."""

    async def test_search_maps_results(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=UNSPLASH_RESULT)

        async with mock_client(handler) as client:
            service = UnsplashService(client, access_key="key", base_url="https://api.unsplash.com")
            images = await service.search_event_images(["tech", "conference"], 2)

        assert seen["params"]["query"] == "tech conference"
        assert seen["params"]["orientation"] == "landscape"
        assert seen["params"]["per_page"] == "2"
        assert seen["auth"] == "Client-ID key"
        assert images[0]["photographer"] == "Jane Doe"
        assert images[0]["download_url"] == "https://api.unsplash.com/photos/abc123/download"
        assert images[1]["alt"] == "Event image related to tech conference"
        assert images[1]["download_url"] == ""

    async def test_placeholders_without_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with mock_client(handler) as client:
            images = await UnsplashService(client).search_event_images(["music"], 3)

        assert images == placeholder_images("music", 3)
        assert images[0]["id"] == "placeholder-0"
        assert "music,event" in images[0]["url"]

    async def test_placeholders_on_api_error(self):
        async with mock_client(lambda request: httpx.Response(403, json={"errors": ["Rate Limit"]})) as client:
            images = await UnsplashService(client, access_key="key").search_event_images(["art"], 5)

        assert len(images) == 5
        assert all(image["id"].startswith("placeholder-") for image in images)

    async def test_track_download(self):
        calls = []

        def handler(request):
            calls.append(str(request.url))
            return httpx.Response(200, json={"url": "https://images.unsplash.com/x"})

        async with mock_client(handler) as client:
            service = UnsplashService(client, access_key="key")
            assert await service.track_download("https://api.unsplash.com/photos/abc/download") is True
            assert await service.track_download("") is False

        assert calls == ["https://api.unsplash.com/photos/abc/download"]

    async def test_track_download_failure_is_swallowed(self):
        async with mock_client(lambda request: httpx.Response(500)) as client:
            ok = await UnsplashService(client, access_key="key").track_download("https://api.unsplash.com/x")

        assert ok is False

    @pytest.mark.parametrize(
        "url",
        [
            "http://169.254.169.254/latest/meta-data",
            "https://attacker.example/photos/abc/download",
            "http://api.unsplash.com/photos/abc/download",
            "https://api.unsplash.com:8443/photos/abc/download",
            "not a url",
        ],
    )
    async def test_track_download_refuses_foreign_urls(self, url):
        calls = []

        def handler(request):
            calls.append(str(request.url))
            return httpx.Response(200)

        async with mock_client(handler) as client:
            service = UnsplashService(client, access_key="key", base_url="https://api.unsplash.com")
            assert await service.track_download(url) is False

        assert calls == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestBannerService:
    """Test banner generation and its cache."""

    async def test_generates_and_caches(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})

        cache = MemoryCache()
        async with mock_client(handler) as client:
            service = BannerService(client, cache, api_key="hf", api_url="https://hf.test/models", model="sdxl", ttl=60)
            first = await service.generate_event_banner("Jazz Night", "Live jazz by the lake", ["jazz", "music", "night", "extra"])
            second = await service.generate_event_banner(" JAZZ NIGHT ", "Other description", ["x"])

        assert len(calls) == 1
        assert str(calls[0].url) == "https://hf.test/models/sdxl"
        assert calls[0].headers["Authorization"] == "Bearer hf"
        assert first["image_data"] == base64.b64encode(PNG_BYTES).decode("ascii")
        assert first["source"] == "huggingface-sdxl"
        assert first["prompt"] == build_banner_prompt("Jazz Night", "Live jazz by the lake", ["jazz", "music", "night"])
        assert second == first

    async def test_no_key_returns_none(self):
        async with mock_client(lambda request: httpx.Response(500)) as client:
            assert await BannerService(client, MemoryCache()).generate_event_banner("t", "d", ["k"]) is None

    async def test_api_error_returns_none(self):
        async with mock_client(lambda request: httpx.Response(503, json={"error": "loading"})) as client:
            service = BannerService(client, MemoryCache(), api_key="hf")
            assert await service.generate_event_banner("t", "d", ["k"]) is None

    async def test_non_image_response_returns_none(self):
        async with mock_client(lambda request: httpx.Response(200, json={"error": "oops"})) as client:
            service = BannerService(client, MemoryCache(), api_key="hf")
            assert await service.generate_event_banner("t", "d", ["k"]) is None


@pytest.mark.unit
def test_banner_prompt_shape():
    prompt = build_banner_prompt("Tech Summit", "x" * 150, ["ai", "cloud", "data", "devops"])

    assert prompt.startswith('Professional event banner for "Tech Summit". ' + "x" * 100 + ".")
    assert "ai, cloud, data" in prompt
    assert "devops" not in prompt
    assert prompt.endswith("landscape orientation, no text")
