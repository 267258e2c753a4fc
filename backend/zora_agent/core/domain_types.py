"""Domain Types — enums and constants shared by every layer.

Invariants:
    - Every closed set of values (tier, platform, risk, sort key) is an Enum — no raw string matching
    - Page-size limits are defined once here, per tier

Design Decisions:
    - str Enums: serialize to JSON and templates without custom encoders
    - Sort key values match the public `sort` query parameter verbatim
"""

from enum import Enum


class AccessTier(str, Enum):
    """Caller entitlement — decides visible fields and result volume."""
    GUEST = "guest"
    FREE = "free"
    PRO = "pro"


class Platform(str, Enum):
    """Marketplaces a collection can be minted on."""
    ZORA = "zora"
    FOUNDATION = "foundation"
    SUPERRARE = "superrare"
    FXHASH = "fxhash"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SortKey(str, Enum):
    """Explicit orderings. All are descending; TRENDING is the default order."""
    VOLUME = "volume"
    FOLLOWERS = "followers"
    MARKET_CAP = "marketcap"
    TRENDING = "trending"


# Filter value meaning "no filter" for platform/risk selects
ALL_VALUES = "all"

# ─── Pagination ──────────────────────────────────────────────────

DEFAULT_PAGE_SIZE: dict[AccessTier, int] = {
    AccessTier.GUEST: 3,
    AccessTier.FREE: 5,
    AccessTier.PRO: 50,
}

MAX_PAGE_SIZE: dict[AccessTier, int] = {
    AccessTier.GUEST: 3,
    AccessTier.FREE: 5,
    AccessTier.PRO: 100,
}

# ─── Comparison ──────────────────────────────────────────────────

MIN_COMPARE_CARDS = 2
MAX_COMPARE_CARDS = 4
