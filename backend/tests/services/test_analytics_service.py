"""Analytics Service — verifies tier-aware operations over JSON-backed repositories.

Tests:
    - Card detail: 404 when unknown, and for guests when the card is not trending
    - Search: blank query rejected; "cyber" finds the Cyber Monk card
    - Pro-only operations: guests → 401, free → 403, pro → data
    - Export covers every matching card without pagination
    - Recently added sorted newest first
"""

import pytest

from zora_agent.core.card_query import AdvancedCriteria, CardFilters
from zora_agent.core.domain_types import AccessTier
from zora_agent.core.entities import MetricsSnapshot
from zora_agent.core.errors import (
    AuthenticationRequiredError, InvalidComparisonError, ProSubscriptionRequiredError,
    ResourceNotFoundError, SearchQueryRequiredError,
)
from zora_agent.core.redaction import UPSELL_MESSAGE
from zora_agent.infrastructure.json_repositories import (
    JsonCardRepository, JsonHistoryRepository,
)
from zora_agent.services.analytics_service import AnalyticsService


@pytest.fixture
def service(tmp_path, make_card):
    cards = JsonCardRepository(tmp_path / "analytics.json")
    history = JsonHistoryRepository(tmp_path / "history.json")
    cards.replace_all([
        make_card("hot", artist="Cyber Monk", trending=True, change=50, age_days=3),
        make_card("cold", artist="Pixel Master", trending=False, market_cap=9e6, age_days=1),
        make_card("warm", artist="Glitch Poet", trending=True, change=5, age_days=10),
    ])
    history.append({"hot": MetricsSnapshot.of(cards.get("hot"))})
    return AnalyticsService(cards, history)


def test_get_card_unknown_is_404(service):
    with pytest.raises(ResourceNotFoundError):
        service.get_card("missing", AccessTier.PRO)


def test_guest_cannot_open_non_trending_card(service):
    with pytest.raises(ResourceNotFoundError):
        service.get_card("cold", AccessTier.GUEST)
    assert service.get_card("cold", AccessTier.FREE).ai_recommendation == UPSELL_MESSAGE


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_search_rejected(service, query):
    with pytest.raises(SearchQueryRequiredError):
        service.search(query, AccessTier.PRO)


def test_search_is_case_insensitive(service):
    page = service.search("CYBER", AccessTier.FREE)
    assert [c.artist.display_name for c in page.cards] == ["Cyber Monk"]


def test_trending_only_returns_trending(service):
    assert {c.id for c in service.trending(AccessTier.PRO)} == {"hot", "warm"}


def test_top_performers_by_market_cap(service):
    assert service.top_performers(AccessTier.PRO)[0].id == "cold"


def test_recently_added_newest_first(service):
    assert [c.id for c in service.recently_added(AccessTier.PRO)] == ["cold", "hot", "warm"]
    # guests only see trending cards
    assert [c.id for c in service.recently_added(AccessTier.GUEST)] == ["hot", "warm"]


def test_demo_cards_are_guest_view(service):
    demo = service.demo_cards()
    assert all(c.trending and c.tags == [] for c in demo)


def test_aggregates_use_unredacted_data(service):
    stats = service.market_stats()
    assert stats["totalProjects"] == 3
    assert stats["topGainer"] == "+50.0%"
    assert service.dashboard_stats()["riskDistribution"]["medium"] == 3


@pytest.mark.parametrize("call", [
    lambda s, t: s.export_csv(t),
    lambda s, t: s.advanced_search(t, CardFilters(), AdvancedCriteria()),
    lambda s, t: s.history("hot", t),
    lambda s, t: s.recommendations(t),
    lambda s, t: s.compare(["hot", "warm"], t),
])
def test_pro_only_operations(service, call):
    with pytest.raises(AuthenticationRequiredError):
        call(service, AccessTier.GUEST)
    with pytest.raises(ProSubscriptionRequiredError):
        call(service, AccessTier.FREE)
    assert call(service, AccessTier.PRO) is not None


def test_export_has_every_matching_card(service):
    lines = service.export_csv(AccessTier.PRO, CardFilters(limit=1)).splitlines()
    assert len(lines) == 4


def test_history_returns_snapshots(service):
    result = service.history("hot", AccessTier.PRO)
    assert result["count"] == 1
    assert "marketCapChange24h" in result["points"][0]
    with pytest.raises(ResourceNotFoundError):
        service.history("missing", AccessTier.PRO)


def test_compare_validates_ids(service):
    with pytest.raises(InvalidComparisonError):
        service.compare(["hot"], AccessTier.PRO)
    with pytest.raises(ResourceNotFoundError):
        service.compare(["hot", "missing"], AccessTier.PRO)
    result = service.compare(["hot", "cold"], AccessTier.PRO)
    assert result["metrics"]["marketCap"]["leader"] == "cold"
