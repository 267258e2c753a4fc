"""Market Data Clients — verifies the mock feed and Zora API decoding.

Tests:
    - Mock returns exactly `limit` collections, reproducible for a seeded rng
    - Zora client decodes {"collections": [...]} and bare lists
    - HTTP errors and bad payloads → MarketDataError
"""

import random

import httpx
import pytest

from zora_agent.core.errors import MarketDataError
from zora_agent.infrastructure.market_data_client import (
    MockMarketDataClient, ZoraMarketDataClient,
)

COLLECTION = {
    "id": "c1", "name": "Neon", "address": "0xabc", "volume24h": 12.5, "floorPrice": 0.1,
}


async def test_mock_is_reproducible():
    first = await MockMarketDataClient(random.Random(3)).get_trending_collections(5)
    second = await MockMarketDataClient(random.Random(3)).get_trending_collections(5)
    assert len(first) == 5
    assert first == second


@pytest.mark.parametrize("body", [{"collections": [COLLECTION]}, [COLLECTION]])
async def test_zora_client_decodes(body):
    def handler(request):
        assert request.url.params["limit"] == "20"
        return httpx.Response(200, json=body)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = ZoraMarketDataClient("https://api.example/v1/", http)
        result = await client.get_trending_collections(20)
    assert result[0].volume_24h == 12.5


@pytest.mark.parametrize("response", [
    httpx.Response(500),
    httpx.Response(200, json={"collections": [{"id": "x"}]}),
    httpx.Response(200, content=b"<html>"),
])
async def test_zora_client_failures(response):
    transport = httpx.MockTransport(lambda request: response)
    async with httpx.AsyncClient(transport=transport) as http:
        with pytest.raises(MarketDataError):
            await ZoraMarketDataClient("https://api.example", http).get_trending_collections()
