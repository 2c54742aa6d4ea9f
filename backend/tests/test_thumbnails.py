import httpx
import pytest

from conftest import mock_client
from weekend.services.thumbnails import thumbnail_for


@pytest.mark.asyncio
async def test_wikipedia_summary_thumbnail():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"thumbnail": {"source": "https://upload.example/senso.jpg"}})

    async with mock_client(handler) as client:
        url = await thumbnail_for({"wikipedia": "ja:浅草寺 本堂"}, client=client)

    assert url == "https://upload.example/senso.jpg"
    assert seen[0].host == "ja.wikipedia.org"
    assert seen[0].path == "/api/rest_v1/page/summary/浅草寺_本堂"


@pytest.mark.asyncio
async def test_wikidata_fallback():
    entity = {
        "entities": {
            "Q123": {"claims": {"P18": [{"mainsnak": {"datavalue": {"value": "Tokyo Tower 2023.jpg"}}}]}}
        }
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host.endswith("wikipedia.org"):
            return httpx.Response(404)
        return httpx.Response(200, json=entity)

    async with mock_client(handler) as client:
        url = await thumbnail_for({"wikipedia": "en:Tokyo Tower", "wikidata": "Q123"}, client=client)

    assert url == "https://commons.wikimedia.org/wiki/Special:FilePath/Tokyo_Tower_2023.jpg?width=120"


@pytest.mark.asyncio
async def test_no_tags_no_lookup():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("unexpected request")

    async with mock_client(handler) as client:
        assert await thumbnail_for({"name": "Somewhere"}, client=client) is None


@pytest.mark.asyncio
async def test_errors_yield_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    async with mock_client(handler) as client:
        assert await thumbnail_for({"wikidata": "Q1"}, client=client) is None


@pytest.mark.asyncio
async def test_entity_without_image():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"entities": {"Q9": {"claims": {}}}})

    async with mock_client(handler) as client:
        assert await thumbnail_for({"wikidata": "Q9"}, client=client) is None
