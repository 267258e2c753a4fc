"""Market Data Clients — trending collection feed from the Zora API, or a local mock.

Invariants:
    - get_trending_collections(limit) returns at most `limit` collections
    - Transport and decoding failures surface as MarketDataError (the refresh job logs them)
    - Mock output depends only on its injected random.Random
"""

import logging
import random
from typing import Protocol

import httpx
from pydantic import ValidationError

from zora_agent.core.entities import MarketCollection
from zora_agent.core.errors import MarketDataError

logger = logging.getLogger(__name__)


class MarketDataClient(Protocol):
    async def get_trending_collections(self, limit: int = 10) -> list[MarketCollection]: ...


class MockMarketDataClient:
    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    async def get_trending_collections(self, limit: int = 10) -> list[MarketCollection]:
        return [
            MarketCollection(
                id=f"collection_{i}",
                name=f"Trending Collection {i + 1}",
                address="0x" + "".join(
                    self._rng.choice("0123456789abcdef") for _ in range(40)
                ),
                volume_24h=round(self._rng.random() * 100_000, 2),
                floor_price=round(self._rng.random() * 10, 4),
            )
            for i in range(limit)
        ]


class ZoraMarketDataClient:
    def __init__(self, base_url: str, http: httpx.AsyncClient):
        self.base_url = base_url.rstrip("/")
        self._http = http

    async def get_trending_collections(self, limit: int = 10) -> list[MarketCollection]:
        try:
            res = await self._http.get(
                f"{self.base_url}/collections/trending", params={"limit": limit},
            )
            res.raise_for_status()
            body = res.json()
            items = body.get("collections", []) if isinstance(body, dict) else body
            return [MarketCollection.model_validate(item) for item in items[:limit]]
        except httpx.HTTPError as e:
            logger.error(f"Zora API request failed: {e}")
            raise MarketDataError("trending collections request failed") from e
        except (ValueError, ValidationError) as e:
            logger.error(f"Zora API returned unexpected payload: {e}")
            raise MarketDataError("unexpected trending collections payload") from e
