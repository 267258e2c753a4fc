"""Entities — typed records for users, analytics cards and metric snapshots.

Invariants:
    - Python attributes are snake_case; the JSON wire/file format is camelCase (aliases)
    - Entities are flat records: no cross-entity references are enforced
    - Entities are never mutated in place by core functions — model_copy(update=...) instead

Design Decisions:
    - Pydantic models over dataclasses: the same type validates the JSON data files,
      serializes API responses and is passed through the pure core
    - populate_by_name=True so tests and services can construct with snake_case names
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from zora_agent.core.domain_types import Platform, RiskLevel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Dump using the on-disk / wire representation."""
        return self.model_dump(mode="json", by_alias=True)


# ─── Analytics ───────────────────────────────────────────────────

class Artist(CamelModel):
    username: str
    display_name: str
    profile_url: str
    twitter_url: str | None = None


class Collection(CamelModel):
    name: str
    contract_address: str | None = None
    platform: Platform


class CardMetrics(CamelModel):
    """Numeric metrics bag. Monetary values are in USD."""
    market_cap: float = 0
    # digit-suffixed names get explicit aliases: to_camel would emit "24H"
    market_cap_change_24h: float = Field(0, alias="marketCapChange24h")
    volume_24h: float = Field(0, alias="volume24h")
    volume_7d: float = Field(0, alias="volume7d")
    followers: int = 0
    followers_change_24h: int = Field(0, alias="followersChange24h")
    smart_followers: int = 0
    twitter_followers: int | None = None
    twitter_followers_change_24h: int | None = Field(
        None, alias="twitterFollowersChange24h",
    )


class AnalyticsCard(CamelModel):
    """One artist/collection analytics record."""
    id: str
    artist: Artist
    collection: Collection
    metrics: CardMetrics
    ai_recommendation: str
    tags: list[str] = Field(default_factory=list)
    risk_level: RiskLevel
    trending: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class MetricsSnapshot(CamelModel):
    """Point-in-time copy of the headline metrics of one card."""
    timestamp: datetime = Field(default_factory=utc_now)
    market_cap: float
    market_cap_change_24h: float = Field(alias="marketCapChange24h")
    volume_24h: float = Field(alias="volume24h")
    followers: int
    smart_followers: int

    @classmethod
    def of(cls, card: AnalyticsCard, at: datetime | None = None) -> "MetricsSnapshot":
        m = card.metrics
        return cls(
            timestamp=at or utc_now(),
            market_cap=m.market_cap,
            market_cap_change_24h=m.market_cap_change_24h,
            volume_24h=m.volume_24h,
            followers=m.followers,
            smart_followers=m.smart_followers,
        )


# ─── Users ───────────────────────────────────────────────────────

class User(CamelModel):
    id: str
    twitter_id: str | None = None
    username: str
    display_name: str
    profile_image: str | None = None
    email: str | None = None
    pro: bool = False
    token_gate_passed: bool = False
    stripe_customer_id: str | None = None
    stripe_subscription_id: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# ─── Market data ─────────────────────────────────────────────────

class MarketCollection(CamelModel):
    """Trending collection as reported by the market-data provider."""
    id: str
    name: str
    address: str
    volume_24h: float = Field(0, alias="volume24h")
    floor_price: float = 0
