"""Analytics Refresh Job — periodic pull of trending collections into the card store.

Invariants:
    - Refresh runs once at start, then every `interval_seconds`
    - One refresh = one whole-file card write + one history append
    - Card ids are stable (zora_<collection id>): a refresh upserts, never duplicates
    - A failed refresh is logged and swallowed; the next interval retries
    - start() on a running job is a no-op; stop() cancels and awaits the task

Design Decisions:
    - Plain asyncio task owned by the app lifespan (no scheduler dependency)
    - Randomness injected (random.Random) so refresh output is reproducible in tests
"""

import asyncio
import logging
import random

from zora_agent.core.demo_data import build_card_from_collection
from zora_agent.core.entities import MetricsSnapshot, utc_now
from zora_agent.core.repository_protocols import CardRepository, HistoryRepository
from zora_agent.infrastructure.market_data_client import MarketDataClient

logger = logging.getLogger(__name__)


class AnalyticsRefreshJob:
    def __init__(
        self,
        cards: CardRepository,
        history: HistoryRepository,
        market_data: MarketDataClient,
        interval_seconds: float = 30 * 60,
        batch_size: int = 20,
        rng: random.Random | None = None,
    ):
        self._cards = cards
        self._history = history
        self._market_data = market_data
        self.interval_seconds = interval_seconds
        self.batch_size = batch_size
        self._rng = rng or random.Random()
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        if self.is_running:
            logger.info("Analytics job already running")
            return False
        logger.info(
            f"Starting analytics job (every {self.interval_seconds / 60:g} minutes)",
        )
        self._task = asyncio.create_task(self._run_forever())
        return True

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Analytics job stopped")

    async def _run_forever(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)

    async def run_once(self) -> int:
        """One refresh pass. Returns the number of cards written (0 on failure)."""
        try:
            return await self._refresh()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Analytics refresh failed: {e}", exc_info=True)
            return 0

    async def _refresh(self) -> int:
        collections = await self._market_data.get_trending_collections(self.batch_size)
        if not collections:
            logger.info("No trending collections returned")
            return 0
        now = utc_now()
        existing = {c.id: c for c in self._cards.all()}
        refreshed = [
            build_card_from_collection(
                col, self._rng, now=now, existing=existing.get(f"zora_{col.id}"),
            )
            for col in collections
        ]
        self._cards.save_many(refreshed)
        self._history.append({c.id: MetricsSnapshot.of(c, at=now) for c in refreshed})
        logger.info(
            f"Updated {len(refreshed)} analytics cards",
            extra={"card_count": len(refreshed)},
        )
        return len(refreshed)
