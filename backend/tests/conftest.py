"""Root conftest — shared test configuration and card factory.

Invariants:
    - Every provider is mocked and the refresh job is off unless a test opts in
    - make_card builds fully valid cards with only the fields a test cares about
"""

import os
from datetime import timedelta

import pytest

# Ensure tests never reach real providers or a developer's data directory
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("MOCK_TWITTER", "1")
os.environ.setdefault("MOCK_STRIPE", "1")
os.environ.setdefault("MOCK_MARKET_DATA", "1")
os.environ.setdefault("ANALYTICS_JOB_ENABLED", "0")
os.environ.setdefault("LOG_FORMAT", "text")

from zora_agent.core.domain_types import Platform, RiskLevel  # noqa: E402
from zora_agent.core.entities import (  # noqa: E402
    AnalyticsCard, Artist, CardMetrics, Collection, utc_now,
)


def _make_card(
    card_id: str = "card_1",
    *,
    artist: str = "Test Artist",
    collection: str = "Test Collection",
    platform: Platform = Platform.ZORA,
    risk: RiskLevel = RiskLevel.MEDIUM,
    trending: bool = False,
    market_cap: float = 100_000,
    change: float = 0.0,
    volume: float = 5_000,
    followers: int = 1_000,
    smart_followers: int = 10,
    tags: tuple[str, ...] = ("digital-art",),
    recommendation: str = "Strong momentum building.",
    age_days: float = 1.0,
) -> AnalyticsCard:
    now = utc_now()
    username = artist.lower().replace(" ", "")
    return AnalyticsCard(
        id=card_id,
        artist=Artist(
            username=username,
            display_name=artist,
            profile_url=f"https://zora.co/@{username}",
        ),
        collection=Collection(name=collection, platform=platform),
        metrics=CardMetrics(
            market_cap=market_cap,
            market_cap_change_24h=change,
            volume_24h=volume,
            volume_7d=volume * 7,
            followers=followers,
            followers_change_24h=5,
            smart_followers=smart_followers,
            twitter_followers=2_000,
            twitter_followers_change_24h=12,
        ),
        ai_recommendation=recommendation,
        tags=list(tags),
        risk_level=risk,
        trending=trending,
        created_at=now - timedelta(days=age_days),
        updated_at=now,
    )


@pytest.fixture
def make_card():
    """Factory for AnalyticsCard with sensible defaults."""
    return _make_card
