"""Tier Redaction — blanks out card fields the caller's tier is not entitled to.

Invariants:
    - PRO cards are returned unchanged (same object)
    - FREE and GUEST: every field in REDACTED_METRIC_FIELDS is exactly 0 and
      ai_recommendation == UPSELL_MESSAGE
    - GUEST additionally has an empty tag list
    - Input cards are never mutated

Design Decisions:
    - One canonical field set for every non-pro code path (list, detail, search,
      demo, recently added) so the redaction cannot drift between endpoints
"""

from zora_agent.core.domain_types import AccessTier
from zora_agent.core.entities import AnalyticsCard

UPSELL_MESSAGE = (
    "Upgrade to Pro to see full AI analysis and market recommendations"
)

REDACTED_METRIC_FIELDS: tuple[str, ...] = (
    "market_cap",
    "market_cap_change_24h",
    "volume_24h",
    "volume_7d",
    "smart_followers",
    "twitter_followers_change_24h",
)


def redact_card(card: AnalyticsCard, tier: AccessTier) -> AnalyticsCard:
    """Return the view of `card` visible to `tier`."""
    if tier is AccessTier.PRO:
        return card
    update: dict = {
        "metrics": card.metrics.model_copy(
            update={name: 0 for name in REDACTED_METRIC_FIELDS},
        ),
        "ai_recommendation": UPSELL_MESSAGE,
    }
    if tier is AccessTier.GUEST:
        update["tags"] = []
    return card.model_copy(update=update)


def redact_cards(cards: list[AnalyticsCard], tier: AccessTier) -> list[AnalyticsCard]:
    return [redact_card(c, tier) for c in cards]
