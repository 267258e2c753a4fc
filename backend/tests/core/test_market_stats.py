"""Market Stats — verifies aggregate statistics over the unredacted card set.

Tests:
    - Empty input yields zeros (never raises)
    - topGainer formatted as "+x.x%"
    - Platform stats always list every platform
    - Weekly performance: activeProjects counts volume24h > 1000
"""

from zora_agent.core.domain_types import Platform, RiskLevel
from zora_agent.core.market_stats import (
    compute_market_stats, compute_platform_stats, compute_risk_distribution,
    compute_weekly_performance,
)


def test_empty_inputs_are_zero():
    assert compute_market_stats([]) == {
        "totalProjects": 0, "trendingToday": 0, "totalVolume24h": 0,
        "topGainer": "+0.0%",
    }
    assert compute_weekly_performance([]) == {
        "totalMarketCap": 0, "avgMarketCapChange": 0.0, "totalVolume24h": 0,
        "activeProjects": 0, "trendingProjects": 0,
    }
    assert compute_risk_distribution([]) == {"low": 0, "medium": 0, "high": 0}


def test_market_stats(make_card):
    cards = [
        make_card("a", trending=True, volume=100, change=12.34),
        make_card("b", volume=200, change=-3),
    ]
    stats = compute_market_stats(cards)
    assert stats["totalProjects"] == 2
    assert stats["trendingToday"] == 1
    assert stats["totalVolume24h"] == 300
    assert stats["topGainer"] == "+12.3%"


def test_platform_stats_cover_every_platform(make_card):
    stats = compute_platform_stats([
        make_card("a", platform=Platform.FXHASH, volume=50, trending=True),
        make_card("b", platform=Platform.FXHASH, volume=25),
    ])
    assert set(stats) == {p.value for p in Platform}
    assert stats["fxhash"] == {"count": 2, "volume": 75, "trending": 1}
    assert stats["zora"]["count"] == 0


def test_risk_distribution(make_card):
    dist = compute_risk_distribution([
        make_card("a", risk=RiskLevel.LOW),
        make_card("b", risk=RiskLevel.HIGH),
        make_card("c", risk=RiskLevel.HIGH),
    ])
    assert dist == {"low": 1, "medium": 0, "high": 2}


def test_weekly_performance(make_card):
    perf = compute_weekly_performance([
        make_card("a", market_cap=100, change=10, volume=1_000, trending=True),
        make_card("b", market_cap=300, change=-4, volume=1_001),
    ])
    assert perf["totalMarketCap"] == 400
    assert perf["avgMarketCapChange"] == 3.0
    assert perf["activeProjects"] == 1
    assert perf["trendingProjects"] == 1
