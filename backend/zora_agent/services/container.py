"""App Container — repositories, providers and services built once per app.

Invariants:
    - Mock vs real providers are chosen here, from Settings, and nowhere else
    - Every JSON file lives under settings.data_dir
    - seed_demo_data() only writes when the card file does not exist yet

Design Decisions:
    - Plain dataclass stored on app.state (no DI framework); routes reach it
      through api/dependencies.get_container
    - One shared httpx.AsyncClient for all real providers, closed by the owner
"""

import logging
import random
from dataclasses import dataclass

import httpx

from zora_agent.config import Settings
from zora_agent.core.demo_data import generate_demo_cards
from zora_agent.core.entities import MetricsSnapshot
from zora_agent.infrastructure.identity_provider import (
    IdentityProvider, MockIdentityProvider, TwitterIdentityProvider,
)
from zora_agent.infrastructure.json_repositories import (
    CARDS_FILE, HISTORY_FILE, USERS_FILE,
    JsonCardRepository, JsonHistoryRepository, JsonUserRepository,
)
from zora_agent.infrastructure.market_data_client import (
    MarketDataClient, MockMarketDataClient, ZoraMarketDataClient,
)
from zora_agent.infrastructure.payment_provider import (
    MockPaymentProvider, PaymentProvider, StripePaymentProvider,
)
from zora_agent.infrastructure.rate_limiter import RateLimiter
from zora_agent.services.analytics_job import AnalyticsRefreshJob
from zora_agent.services.analytics_service import AnalyticsService
from zora_agent.services.auth_service import AuthService
from zora_agent.services.billing_service import BillingService
from zora_agent.services.dev_users_service import DevUserService

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    http: httpx.AsyncClient
    cards: JsonCardRepository
    users: JsonUserRepository
    history: JsonHistoryRepository
    analytics: AnalyticsService
    auth: AuthService
    billing: BillingService
    dev_users: DevUserService
    refresh_job: AnalyticsRefreshJob
    rate_limiter: RateLimiter

    def seed_demo_data(self) -> bool:
        if self.cards.exists():
            return False
        cards = generate_demo_cards()
        self.cards.replace_all(cards)
        self.history.append({c.id: MetricsSnapshot.of(c) for c in cards})
        logger.info(
            f"Seeded {len(cards)} demo cards", extra={"card_count": len(cards)},
        )
        return True

    async def aclose(self) -> None:
        await self.refresh_job.stop()
        await self.http.aclose()


def build_identity_provider(
    settings: Settings, http: httpx.AsyncClient,
) -> IdentityProvider:
    if settings.mock_twitter:
        return MockIdentityProvider()
    return TwitterIdentityProvider(
        settings.twitter_client_id,
        settings.twitter_client_secret,
        settings.twitter_callback_url,
        http,
    )


def build_payment_provider(settings: Settings) -> PaymentProvider:
    if settings.mock_stripe:
        return MockPaymentProvider(settings.mock_payment_secret)
    return StripePaymentProvider(
        settings.stripe_secret_key,
        settings.stripe_webhook_secret,
        settings.stripe_price_id,
    )


def build_market_data_client(
    settings: Settings, http: httpx.AsyncClient,
) -> MarketDataClient:
    if settings.mock_market_data:
        return MockMarketDataClient()
    return ZoraMarketDataClient(settings.zora_api_url, http)


def build_container(
    settings: Settings,
    http: httpx.AsyncClient | None = None,
    market_data: MarketDataClient | None = None,
    rng: random.Random | None = None,
) -> AppContainer:
    http = http or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    data_dir = settings.data_dir
    cards = JsonCardRepository(data_dir / CARDS_FILE)
    users = JsonUserRepository(data_dir / USERS_FILE)
    history = JsonHistoryRepository(
        data_dir / HISTORY_FILE, max_points=settings.analytics_history_points,
    )
    identity = build_identity_provider(settings, http)
    payments = build_payment_provider(settings)
    logger.info(
        f"Providers: identity={identity.name} payments={payments.name} "
        f"market_data={'mock' if settings.mock_market_data else 'zora'}",
    )
    return AppContainer(
        settings=settings,
        http=http,
        cards=cards,
        users=users,
        history=history,
        analytics=AnalyticsService(cards, history),
        auth=AuthService(users, identity),
        billing=BillingService(users, payments, settings.base_url),
        dev_users=DevUserService(users),
        refresh_job=AnalyticsRefreshJob(
            cards,
            history,
            market_data or build_market_data_client(settings, http),
            interval_seconds=settings.analytics_refresh_minutes * 60,
            batch_size=settings.analytics_refresh_batch,
            rng=rng,
        ),
        rate_limiter=RateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    )
