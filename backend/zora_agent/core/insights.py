"""Pro Insights — opportunity ranking and side-by-side card comparison.

Invariants:
    - opportunity_score is deterministic for a given card (no randomness, no clock)
    - compare_cards requires MIN_COMPARE_CARDS..MAX_COMPARE_CARDS distinct cards
    - Leader of a metric is the first card holding the maximum value (input order breaks ties)
"""

import math

from zora_agent.core.domain_types import (
    RiskLevel, MIN_COMPARE_CARDS, MAX_COMPARE_CARDS,
)
from zora_agent.core.entities import AnalyticsCard
from zora_agent.core.errors import InvalidComparisonError

RISK_PENALTY = {RiskLevel.LOW: 0.0, RiskLevel.MEDIUM: 1.0, RiskLevel.HIGH: 2.5}
TRENDING_BONUS = 2.0

# (wire name, attribute on CardMetrics)
COMPARED_METRICS: tuple[tuple[str, str], ...] = (
    ("marketCap", "market_cap"),
    ("marketCapChange24h", "market_cap_change_24h"),
    ("volume24h", "volume_24h"),
    ("volume7d", "volume_7d"),
    ("followers", "followers"),
    ("smartFollowers", "smart_followers"),
)


def opportunity_score(card: AnalyticsCard) -> float:
    m = card.metrics
    momentum = max(-10.0, min(10.0, m.market_cap_change_24h / 10))
    liquidity = math.log10(1 + max(m.volume_24h, 0))
    smart_money = m.smart_followers / 50
    score = momentum + liquidity + smart_money - RISK_PENALTY[card.risk_level]
    if card.trending:
        score += TRENDING_BONUS
    return round(score, 2)


def opportunity_signals(card: AnalyticsCard) -> list[str]:
    m = card.metrics
    signals = []
    if card.trending:
        signals.append("trending")
    if m.market_cap_change_24h > 0:
        signals.append("positive momentum")
    elif m.market_cap_change_24h < 0:
        signals.append("negative momentum")
    if m.smart_followers >= 100:
        signals.append("smart money accumulating")
    if m.followers_change_24h > 0:
        signals.append("growing community")
    if card.risk_level is RiskLevel.HIGH:
        signals.append("high risk")
    return signals


def rank_opportunities(cards: list[AnalyticsCard], limit: int) -> list[dict]:
    ranked = sorted(cards, key=opportunity_score, reverse=True)[:max(limit, 0)]
    return [
        {
            "card": card,
            "score": opportunity_score(card),
            "signals": opportunity_signals(card),
        }
        for card in ranked
    ]


def check_comparison_ids(card_ids: list[str]) -> None:
    if len(set(card_ids)) != len(card_ids):
        raise InvalidComparisonError("Comparison ids must be distinct")
    if not MIN_COMPARE_CARDS <= len(card_ids) <= MAX_COMPARE_CARDS:
        raise InvalidComparisonError(
            f"Comparison needs between {MIN_COMPARE_CARDS} and "
            f"{MAX_COMPARE_CARDS} cards, got {len(card_ids)}"
        )


def compare_cards(cards: list[AnalyticsCard]) -> dict:
    check_comparison_ids([c.id for c in cards])
    metrics = {}
    for wire_name, attr in COMPARED_METRICS:
        values = {c.id: getattr(c.metrics, attr) for c in cards}
        best = max(values.values())
        leader = next(cid for cid, v in values.items() if v == best)
        metrics[wire_name] = {"values": values, "leader": leader}
    return {"cards": cards, "metrics": metrics}
