"""Analytics Schemas — request bodies and response envelopes for /analytics.

Invariants:
    - Wire format is camelCase (CamelModel aliases); snake_case accepted too
    - AdvancedSearchRequest rejects negative ranges and max < min (→ 400)
    - Response envelopes carry already-redacted cards

Design Decisions:
    - Requests convert to core dataclasses (to_filters / to_criteria) so core/
      never depends on pydantic request models
"""

from pydantic import Field, model_validator

from zora_agent.core.card_query import AdvancedCriteria, CardFilters, CardPage
from zora_agent.core.domain_types import AccessTier, Platform, RiskLevel, SortKey
from zora_agent.core.entities import AnalyticsCard, CamelModel


class AdvancedSearchRequest(CamelModel):
    """Pro-only search: basic filters plus ranges and multi-value matches."""
    search: str | None = Field(None, max_length=200)
    trending: bool = False
    sort: SortKey | None = None
    limit: int | None = Field(None, ge=1)
    offset: int = Field(0, ge=0)
    platforms: list[Platform] = Field(default_factory=list)
    risk_levels: list[RiskLevel] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    min_market_cap: float | None = Field(None, ge=0)
    max_market_cap: float | None = Field(None, ge=0)
    min_volume_24h: float | None = Field(None, ge=0, alias="minVolume24h")
    min_followers: int | None = Field(None, ge=0)
    min_smart_followers: int | None = Field(None, ge=0)
    min_market_cap_change_24h: float | None = Field(
        None, alias="minMarketCapChange24h",
    )

    @model_validator(mode="after")
    def check_market_cap_range(self):
        if (
            self.min_market_cap is not None
            and self.max_market_cap is not None
            and self.max_market_cap < self.min_market_cap
        ):
            raise ValueError("maxMarketCap must be >= minMarketCap")
        return self

    def to_filters(self) -> CardFilters:
        return CardFilters(
            trending=self.trending,
            search=self.search,
            sort_by=self.sort,
            limit=self.limit,
            offset=self.offset,
        )

    def to_criteria(self) -> AdvancedCriteria:
        return AdvancedCriteria(
            platforms=tuple(p.value for p in self.platforms),
            risk_levels=tuple(r.value for r in self.risk_levels),
            tags=tuple(self.tags),
            min_market_cap=self.min_market_cap,
            max_market_cap=self.max_market_cap,
            min_volume_24h=self.min_volume_24h,
            min_followers=self.min_followers,
            min_smart_followers=self.min_smart_followers,
            min_market_cap_change_24h=self.min_market_cap_change_24h,
        )


class CardListResponse(CamelModel):
    cards: list[AnalyticsCard]
    total: int
    limit: int
    offset: int
    tier: AccessTier
    filters: dict = Field(default_factory=dict)

    @classmethod
    def from_page(
        cls, page: CardPage, tier: AccessTier, filters: CardFilters,
    ) -> "CardListResponse":
        return cls(
            cards=page.cards,
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            tier=tier,
            filters=filters.as_dict(),
        )


class SearchResponse(CamelModel):
    query: str
    results: list[AnalyticsCard]
    count: int
    total: int


class DashboardResponse(CamelModel):
    """JSON flavour of GET /analytics."""
    cards: list[AnalyticsCard]
    total: int
    stats: dict
    platform_stats: dict
    risk_distribution: dict
    is_pro: bool
    tier: AccessTier
    filters: dict = Field(default_factory=dict)
