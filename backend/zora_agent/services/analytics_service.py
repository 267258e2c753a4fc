"""Analytics Service — tier-aware read operations over the card repository.

Invariants:
    - Every call re-reads the full card list from the repository (no caching)
    - Card lists leaving this service are already redacted for the caller's tier
    - Aggregate statistics are computed on the unredacted set
    - Pro-only operations raise before touching storage: guests get
      AuthenticationRequiredError, free users ProSubscriptionRequiredError

Design Decisions:
    - Thin imperative shell: IO via repositories, every decision delegated to core/
"""

import logging

from zora_agent.core.access_tier import effective_page_size
from zora_agent.core.card_query import (
    AdvancedCriteria, CardFilters, CardPage, filter_cards, query_cards,
    sort_cards, visible_to_tier,
)
from zora_agent.core.csv_export import cards_to_csv
from zora_agent.core.domain_types import AccessTier, SortKey
from zora_agent.core.entities import AnalyticsCard
from zora_agent.core.errors import (
    AuthenticationRequiredError, ProSubscriptionRequiredError,
    ResourceNotFoundError, SearchQueryRequiredError,
)
from zora_agent.core.insights import (
    check_comparison_ids, compare_cards, rank_opportunities,
)
from zora_agent.core.market_stats import (
    compute_market_stats, compute_platform_stats, compute_risk_distribution,
    compute_weekly_performance,
)
from zora_agent.core.redaction import redact_card, redact_cards
from zora_agent.core.repository_protocols import CardRepository, HistoryRepository

logger = logging.getLogger(__name__)


def require_pro(tier: AccessTier, feature: str) -> None:
    if tier is AccessTier.GUEST:
        raise AuthenticationRequiredError()
    if tier is not AccessTier.PRO:
        raise ProSubscriptionRequiredError(feature)


class AnalyticsService:
    def __init__(self, cards: CardRepository, history: HistoryRepository):
        self._cards = cards
        self._history = history

    # ─── Listing ─────────────────────────────────────────────────

    def list_cards(
        self, tier: AccessTier, filters: CardFilters | None = None,
    ) -> CardPage:
        page = query_cards(self._cards.all(), tier, filters)
        logger.debug(
            f"Listed {len(page.cards)}/{page.total} cards",
            extra={"tier": tier.value, "card_count": len(page.cards)},
        )
        return page

    def get_card(self, card_id: str, tier: AccessTier) -> AnalyticsCard:
        card = self._cards.get(card_id)
        if card is None or not visible_to_tier([card], tier):
            raise ResourceNotFoundError("Card", card_id)
        return redact_card(card, tier)

    def trending(self, tier: AccessTier, limit: int = 8) -> list[AnalyticsCard]:
        return self.list_cards(tier, CardFilters(trending=True, limit=limit)).cards

    def search(
        self, query: str | None, tier: AccessTier, limit: int | None = None,
    ) -> CardPage:
        if not query or not query.strip():
            raise SearchQueryRequiredError()
        return self.list_cards(tier, CardFilters(search=query.strip(), limit=limit))

    def top_performers(self, tier: AccessTier, limit: int = 5) -> list[AnalyticsCard]:
        return self.list_cards(
            tier, CardFilters(sort_by=SortKey.MARKET_CAP, limit=limit),
        ).cards

    def recently_added(self, tier: AccessTier, limit: int = 5) -> list[AnalyticsCard]:
        visible = visible_to_tier(self._cards.all(), tier)
        newest = sorted(visible, key=lambda c: c.created_at, reverse=True)
        return redact_cards(newest[:effective_page_size(tier, limit)], tier)

    def demo_cards(self) -> list[AnalyticsCard]:
        """Landing-page preview: exactly what a guest would see."""
        return self.list_cards(AccessTier.GUEST).cards

    # ─── Aggregates ──────────────────────────────────────────────

    def market_stats(self) -> dict:
        return compute_market_stats(self._cards.all())

    def platform_stats(self) -> dict:
        return compute_platform_stats(self._cards.all())

    def risk_distribution(self) -> dict:
        return compute_risk_distribution(self._cards.all())

    def weekly_performance(self) -> dict:
        return compute_weekly_performance(self._cards.all())

    def dashboard_stats(self) -> dict:
        """All dashboard aggregates from a single read."""
        cards = self._cards.all()
        return {
            "stats": compute_market_stats(cards),
            "platformStats": compute_platform_stats(cards),
            "riskDistribution": compute_risk_distribution(cards),
        }

    # ─── Pro features ────────────────────────────────────────────

    def export_csv(self, tier: AccessTier, filters: CardFilters | None = None) -> str:
        require_pro(tier, "data export")
        filters = filters or CardFilters()
        cards = sort_cards(filter_cards(self._cards.all(), filters), filters.sort_by)
        logger.info(f"Exporting {len(cards)} cards", extra={"card_count": len(cards)})
        return cards_to_csv(cards)

    def advanced_search(
        self,
        tier: AccessTier,
        filters: CardFilters,
        criteria: AdvancedCriteria,
    ) -> CardPage:
        require_pro(tier, "advanced search")
        return query_cards(self._cards.all(), tier, filters, criteria)

    def history(self, card_id: str, tier: AccessTier) -> dict:
        require_pro(tier, "historical data")
        if self._cards.get(card_id) is None:
            raise ResourceNotFoundError("Card", card_id)
        points = self._history.for_card(card_id)
        return {
            "cardId": card_id,
            "points": [p.to_json_dict() for p in points],
            "count": len(points),
        }

    def recommendations(self, tier: AccessTier, limit: int = 5) -> list[dict]:
        require_pro(tier, "AI recommendations")
        return rank_opportunities(
            self._cards.all(), effective_page_size(tier, limit),
        )

    def compare(self, card_ids: list[str], tier: AccessTier) -> dict:
        require_pro(tier, "card comparison")
        check_comparison_ids(card_ids)
        by_id = {c.id: c for c in self._cards.all()}
        missing = [cid for cid in card_ids if cid not in by_id]
        if missing:
            raise ResourceNotFoundError("Card", missing[0])
        return compare_cards([by_id[cid] for cid in card_ids])
