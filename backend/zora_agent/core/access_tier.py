"""Access Tier Resolution — maps a (possibly absent) user to guest/free/pro.

Invariants:
    - No user -> GUEST; pro OR token_gate_passed -> PRO; otherwise FREE
    - Page sizes always come from domain_types tables, never literals at call sites
"""

from zora_agent.core.domain_types import (
    AccessTier, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE,
)
from zora_agent.core.entities import User


def resolve_access_tier(user: User | None) -> AccessTier:
    if user is None:
        return AccessTier.GUEST
    if user.pro or user.token_gate_passed:
        return AccessTier.PRO
    return AccessTier.FREE


def has_pro_access(user: User | None) -> bool:
    return resolve_access_tier(user) is AccessTier.PRO


def effective_page_size(tier: AccessTier, requested: int | None) -> int:
    """Default page size when nothing requested, clamped to the tier maximum."""
    if requested is None or requested <= 0:
        return DEFAULT_PAGE_SIZE[tier]
    return min(requested, MAX_PAGE_SIZE[tier])


def safe_user_data(user: User | None) -> dict | None:
    """Subset of user fields safe to expose to templates and JSON clients."""
    if user is None:
        return None
    return {
        "id": user.id,
        "username": user.username,
        "displayName": user.display_name,
        "profileImage": user.profile_image,
        "pro": user.pro,
        "tokenGatePassed": user.token_gate_passed,
        "accessLevel": resolve_access_tier(user).value,
        "hasProAccess": has_pro_access(user),
    }
