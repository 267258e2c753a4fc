"""Card Query — verifies filtering, sorting, tier visibility and pagination.

Tests:
    - Predicates are conjunctive; "all"/empty mean no filter
    - Search is case-insensitive across names, tags and recommendation;
      below pro it skips the fields redaction hides
    - Guest candidate set is restricted to trending cards before other filters
    - Default order: trending first, then 24h change descending; explicit keys override
    - total counts matches before pagination; pages never exceed the tier maximum
    - Advanced criteria: ranges, multi-value platform/risk, any-tag match
"""

import itertools

import pytest

from zora_agent.core.card_query import (
    AdvancedCriteria, CardFilters, filter_cards, matches_search, query_cards,
    sort_cards, visible_to_tier,
)
from zora_agent.core.domain_types import AccessTier, Platform, RiskLevel, SortKey
from zora_agent.core.redaction import UPSELL_MESSAGE


@pytest.fixture
def cards(make_card):
    return [
        make_card("c1", artist="Cyber Monk", platform=Platform.ZORA,
                  risk=RiskLevel.LOW, trending=True, change=10, volume=500,
                  followers=50, market_cap=1_000, tags=("cyberpunk",)),
        make_card("c2", artist="Pixel Master", platform=Platform.FOUNDATION,
                  risk=RiskLevel.HIGH, trending=False, change=90, volume=9_000,
                  followers=10, market_cap=5_000, tags=("pixel-art",)),
        make_card("c3", artist="Glitch Poet", platform=Platform.ZORA,
                  risk=RiskLevel.MEDIUM, trending=True, change=40, volume=100,
                  followers=900, market_cap=3_000, tags=("glitch",),
                  recommendation="Whale accumulation detected."),
        make_card("c4", artist="Neon Wave", platform=Platform.FXHASH,
                  risk=RiskLevel.LOW, trending=False, change=-5, volume=2_000,
                  followers=300, market_cap=8_000, collection="Neon Nights"),
        make_card("c5", artist="Data Sculptor", platform=Platform.SUPERRARE,
                  risk=RiskLevel.HIGH, trending=True, change=-20, volume=700,
                  followers=20, market_cap=500),
    ]


# ─── Predicates ──────────────────────────────────────────────────

def test_platform_all_means_no_filter(cards):
    assert len(filter_cards(cards, CardFilters(platform="all"))) == 5
    assert len(filter_cards(cards, CardFilters(platform=""))) == 5


def test_filters_are_conjunctive(cards):
    result = filter_cards(cards, CardFilters(platform="zora", risk="low"))
    assert [c.id for c in result] == ["c1"]


def test_trending_only(cards):
    result = filter_cards(cards, CardFilters(trending=True))
    assert {c.id for c in result} == {"c1", "c3", "c5"}


@pytest.mark.parametrize("query, expected", [
    ("cyber", {"c1"}),              # artist display name, case-insensitive
    ("PIXEL-ART", {"c2"}),          # tag
    ("neon nights", {"c4"}),        # collection name
    ("whale", {"c3"}),              # recommendation text
    ("glitchpoet", {"c3"}),         # artist username
])
def test_search_fields(cards, query, expected):
    result = filter_cards(cards, CardFilters(search=query))
    assert {c.id for c in result} == expected


def test_blank_search_matches_everything(make_card):
    assert matches_search(make_card(), "   ")
    assert matches_search(make_card(), None)


@pytest.mark.parametrize("tier, query, expected", [
    (AccessTier.PRO, "whale", {"c3"}),
    (AccessTier.FREE, "whale", set()),          # recommendation hidden below pro
    (AccessTier.FREE, "pixel-art", {"c2"}),
    (AccessTier.GUEST, "glitch", {"c3"}),       # still matches the artist name
    (AccessTier.GUEST, "cyberpunk", set()),     # tags hidden from guests
])
def test_search_ignores_redacted_fields(cards, tier, query, expected):
    page = query_cards(cards, tier, CardFilters(search=query))
    assert {c.id for c in page.cards} == expected
    assert page.total == len(expected)


# ─── Sorting ─────────────────────────────────────────────────────

def test_default_order_trending_first_then_change(cards):
    assert [c.id for c in sort_cards(cards)] == ["c3", "c1", "c5", "c2", "c4"]


def test_sort_by_volume_is_non_increasing(cards):
    volumes = [c.metrics.volume_24h for c in sort_cards(cards, SortKey.VOLUME)]
    assert volumes == sorted(volumes, reverse=True)


def test_sort_by_market_cap_and_followers(cards):
    assert sort_cards(cards, SortKey.MARKET_CAP)[0].id == "c4"
    assert sort_cards(cards, SortKey.FOLLOWERS)[0].id == "c3"


def test_sort_is_stable(make_card):
    tied = [make_card(f"t{i}", volume=100) for i in range(4)]
    assert [c.id for c in sort_cards(tied, SortKey.VOLUME)] == ["t0", "t1", "t2", "t3"]


# ─── Tier pipeline ───────────────────────────────────────────────

def test_guest_sees_only_trending(cards):
    assert all(c.trending for c in visible_to_tier(cards, AccessTier.GUEST))
    page = query_cards(cards, AccessTier.GUEST, CardFilters(platform="foundation"))
    # c2 is the only foundation card and it is not trending
    assert page.total == 0
    assert page.cards == []


def test_guest_page_redacted_and_capped(cards):
    page = query_cards(cards, AccessTier.GUEST, CardFilters(limit=50))
    assert len(page.cards) <= 3
    for card in page.cards:
        assert card.trending
        assert card.tags == []
        assert card.metrics.market_cap == 0
        assert card.ai_recommendation == UPSELL_MESSAGE


def test_total_counts_before_pagination(cards):
    page = query_cards(cards, AccessTier.FREE, CardFilters(limit=2, offset=1))
    assert page.total == 5
    assert len(page.cards) == 2
    assert page.offset == 1


def test_offset_past_end_returns_empty_page(cards):
    page = query_cards(cards, AccessTier.PRO, CardFilters(offset=99))
    assert page.cards == []
    assert page.total == 5


def test_pro_cards_unredacted(cards):
    page = query_cards(cards, AccessTier.PRO)
    assert {c.ai_recommendation for c in page.cards} != {UPSELL_MESSAGE}
    assert page.limit == 50


@pytest.mark.parametrize("tier, platform, risk, trending", list(itertools.product(
    list(AccessTier),
    [None, "all", "zora", "fxhash"],
    [None, "low", "high"],
    [False, True],
)))
def test_total_matches_filtered_count(cards, tier, platform, risk, trending):
    filters = CardFilters(platform=platform, risk=risk, trending=trending, limit=1)
    expected = filter_cards(visible_to_tier(cards, tier), filters)
    page = query_cards(cards, tier, filters)
    assert page.total == len(expected)
    assert len(page.cards) == min(1, len(expected))


def test_filters_echo_drops_unset_values():
    echo = CardFilters(platform="zora", sort_by=SortKey.VOLUME).as_dict()
    assert echo == {"platform": "zora", "sortBy": "volume"}


# ─── Advanced criteria ───────────────────────────────────────────

def test_market_cap_range(cards):
    criteria = AdvancedCriteria(min_market_cap=1_000, max_market_cap=5_000)
    result = filter_cards(cards, CardFilters(), criteria)
    assert {c.id for c in result} == {"c1", "c2", "c3"}


def test_multi_value_platform_and_risk(cards):
    criteria = AdvancedCriteria(platforms=("zora", "fxhash"), risk_levels=("low",))
    result = filter_cards(cards, CardFilters(), criteria)
    assert {c.id for c in result} == {"c1", "c4"}


def test_any_tag_match(cards):
    criteria = AdvancedCriteria(tags=("GLITCH", "cyberpunk"))
    result = filter_cards(cards, CardFilters(), criteria)
    assert {c.id for c in result} == {"c1", "c3"}


def test_minimum_thresholds(cards):
    criteria = AdvancedCriteria(min_volume_24h=600, min_market_cap_change_24h=0)
    result = filter_cards(cards, CardFilters(), criteria)
    assert {c.id for c in result} == {"c2"}
