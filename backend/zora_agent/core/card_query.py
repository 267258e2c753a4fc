"""Card Query Engine — filter, sort, paginate and redact analytics cards per tier.

Invariants:
    - Predicates are independent and conjunctive (platform AND risk AND trending AND search)
    - GUEST sees the trending subset only: restriction applied before any other predicate
    - CardPage.total == number of matching cards BEFORE pagination
    - Pagination (offset/limit) runs AFTER filtering and sorting
    - Sorting runs on unredacted cards; redaction is the last step
    - Search only looks at fields the tier can see after redaction (no
      recommendation text below PRO, no tags for GUEST)
    - All functions are pure: no IO, input lists are never mutated

Design Decisions:
    - Sorting via sorted() with key functions: stable, so equal keys keep file order
    - "all" and empty strings mean "no filter" for platform/risk (HTML select values)
"""

from dataclasses import dataclass, field

from zora_agent.core.access_tier import effective_page_size
from zora_agent.core.domain_types import AccessTier, ALL_VALUES, SortKey
from zora_agent.core.entities import AnalyticsCard
from zora_agent.core.redaction import redact_cards


@dataclass(frozen=True)
class CardFilters:
    """Filter parameters accepted at the list/filter boundary."""
    platform: str | None = None
    risk: str | None = None
    trending: bool = False
    search: str | None = None
    sort_by: SortKey | None = None
    limit: int | None = None
    offset: int = 0

    def as_dict(self) -> dict:
        """Echo of the active filters, dropping unset values."""
        raw = {
            "platform": self.platform,
            "risk": self.risk,
            "trending": self.trending or None,
            "search": self.search,
            "sortBy": self.sort_by.value if self.sort_by else None,
            "limit": self.limit,
            "offset": self.offset or None,
        }
        return {k: v for k, v in raw.items() if v not in (None, "")}


@dataclass(frozen=True)
class AdvancedCriteria:
    """Pro-only numeric ranges and multi-value matches layered on CardFilters."""
    platforms: tuple[str, ...] = ()
    risk_levels: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    min_market_cap: float | None = None
    max_market_cap: float | None = None
    min_volume_24h: float | None = None
    min_followers: int | None = None
    min_smart_followers: int | None = None
    min_market_cap_change_24h: float | None = None


@dataclass
class CardPage:
    cards: list[AnalyticsCard] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0


# ─── Predicates ──────────────────────────────────────────────────

def _is_unset(value: str | None) -> bool:
    return not value or value == ALL_VALUES


def matches_platform(card: AnalyticsCard, platform: str | None) -> bool:
    return _is_unset(platform) or card.collection.platform.value == platform


def matches_risk(card: AnalyticsCard, risk: str | None) -> bool:
    return _is_unset(risk) or card.risk_level.value == risk


def matches_trending(card: AnalyticsCard, trending_only: bool) -> bool:
    return card.trending or not trending_only


def searchable_text(card: AnalyticsCard, tier: AccessTier) -> list[str]:
    """Fields a tier may search: only what survives its redaction."""
    texts = [card.artist.display_name, card.artist.username, card.collection.name]
    if tier is AccessTier.PRO:
        texts.append(card.ai_recommendation)
    if tier is not AccessTier.GUEST:
        texts.extend(card.tags)
    return texts


def matches_search(
    card: AnalyticsCard, query: str | None, tier: AccessTier = AccessTier.PRO,
) -> bool:
    """Case-insensitive substring match over the fields `tier` can see."""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    return any(needle in text.lower() for text in searchable_text(card, tier))


def matches_filters(
    card: AnalyticsCard, filters: CardFilters, tier: AccessTier = AccessTier.PRO,
) -> bool:
    return (
        matches_platform(card, filters.platform)
        and matches_risk(card, filters.risk)
        and matches_trending(card, filters.trending)
        and matches_search(card, filters.search, tier)
    )


def matches_advanced(card: AnalyticsCard, criteria: AdvancedCriteria) -> bool:
    m = card.metrics
    if criteria.platforms and card.collection.platform.value not in criteria.platforms:
        return False
    if criteria.risk_levels and card.risk_level.value not in criteria.risk_levels:
        return False
    if criteria.tags:
        wanted = {t.lower() for t in criteria.tags}
        if not wanted.intersection(t.lower() for t in card.tags):
            return False
    bounds = (
        (criteria.min_market_cap, m.market_cap, False),
        (criteria.max_market_cap, m.market_cap, True),
        (criteria.min_volume_24h, m.volume_24h, False),
        (criteria.min_followers, m.followers, False),
        (criteria.min_smart_followers, m.smart_followers, False),
        (criteria.min_market_cap_change_24h, m.market_cap_change_24h, False),
    )
    for bound, value, is_max in bounds:
        if bound is None:
            continue
        if (value > bound) if is_max else (value < bound):
            return False
    return True


# ─── Sorting ─────────────────────────────────────────────────────

def _trending_key(card: AnalyticsCard) -> tuple:
    return (not card.trending, -card.metrics.market_cap_change_24h)


_SORT_KEYS = {
    SortKey.VOLUME: lambda c: -c.metrics.volume_24h,
    SortKey.FOLLOWERS: lambda c: -c.metrics.followers,
    SortKey.MARKET_CAP: lambda c: -c.metrics.market_cap,
    SortKey.TRENDING: _trending_key,
}


def sort_cards(
    cards: list[AnalyticsCard], sort_by: SortKey | None = None,
) -> list[AnalyticsCard]:
    """Descending by the chosen key; default is trending-first then 24h change."""
    return sorted(cards, key=_SORT_KEYS[sort_by or SortKey.TRENDING])


# ─── Pipeline ────────────────────────────────────────────────────

def visible_to_tier(cards: list[AnalyticsCard], tier: AccessTier) -> list[AnalyticsCard]:
    """Candidate set for a tier before any user-supplied filter."""
    if tier is AccessTier.GUEST:
        return [c for c in cards if c.trending]
    return list(cards)


def filter_cards(
    cards: list[AnalyticsCard],
    filters: CardFilters,
    criteria: AdvancedCriteria | None = None,
    tier: AccessTier = AccessTier.PRO,
) -> list[AnalyticsCard]:
    return [
        c for c in cards
        if matches_filters(c, filters, tier)
        and (criteria is None or matches_advanced(c, criteria))
    ]


def paginate(
    cards: list[AnalyticsCard], offset: int, limit: int,
) -> list[AnalyticsCard]:
    offset = max(offset, 0)
    return cards[offset:offset + limit]


def query_cards(
    cards: list[AnalyticsCard],
    tier: AccessTier,
    filters: CardFilters | None = None,
    criteria: AdvancedCriteria | None = None,
) -> CardPage:
    """Full pipeline: tier visibility -> filter -> sort -> total -> paginate -> redact."""
    filters = filters or CardFilters()
    matched = filter_cards(
        visible_to_tier(cards, tier), filters, criteria, tier,
    )
    ordered = sort_cards(matched, filters.sort_by)
    limit = effective_page_size(tier, filters.limit)
    page = paginate(ordered, filters.offset, limit)
    return CardPage(
        cards=redact_cards(page, tier),
        total=len(ordered),
        limit=limit,
        offset=filters.offset,
    )
