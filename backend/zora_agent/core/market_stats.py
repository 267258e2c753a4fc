"""Market Stats — pure aggregate statistics over the full (unredacted) card set.

Invariants:
    - Never raises on an empty card list — counts and sums default to 0
    - Returns flat JSON-serializable dicts with camelCase keys (wire format)
"""

from zora_agent.core.domain_types import Platform, RiskLevel
from zora_agent.core.entities import AnalyticsCard

ACTIVE_VOLUME_THRESHOLD = 1000


def compute_market_stats(cards: list[AnalyticsCard]) -> dict:
    top_gainer = max(
        (c.metrics.market_cap_change_24h for c in cards), default=0.0,
    )
    return {
        "totalProjects": len(cards),
        "trendingToday": sum(1 for c in cards if c.trending),
        "totalVolume24h": sum(c.metrics.volume_24h for c in cards),
        "topGainer": f"+{top_gainer:.1f}%",
    }


def compute_platform_stats(cards: list[AnalyticsCard]) -> dict:
    stats = {
        p.value: {"count": 0, "volume": 0, "trending": 0} for p in Platform
    }
    for card in cards:
        entry = stats[card.collection.platform.value]
        entry["count"] += 1
        entry["volume"] += card.metrics.volume_24h
        if card.trending:
            entry["trending"] += 1
    return stats


def compute_risk_distribution(cards: list[AnalyticsCard]) -> dict:
    dist = {r.value: 0 for r in RiskLevel}
    for card in cards:
        dist[card.risk_level.value] += 1
    return dist


def compute_weekly_performance(cards: list[AnalyticsCard]) -> dict:
    changes = [c.metrics.market_cap_change_24h for c in cards]
    return {
        "totalMarketCap": sum(c.metrics.market_cap for c in cards),
        "avgMarketCapChange": sum(changes) / len(changes) if changes else 0.0,
        "totalVolume24h": sum(c.metrics.volume_24h for c in cards),
        "activeProjects": sum(
            1 for c in cards if c.metrics.volume_24h > ACTIVE_VOLUME_THRESHOLD
        ),
        "trendingProjects": sum(1 for c in cards if c.trending),
    }
