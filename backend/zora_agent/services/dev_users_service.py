"""Dev User Service — switch between canned user profiles during development.

Invariants:
    - Only the profiles in MOCK_USER_PROFILES can be switched to
    - Switching to a profile creates the user on first use and resets its
      display name and flags on every later use
    - Only mounted outside production (see main.py)
"""

import logging
from dataclasses import dataclass

from zora_agent.core.entities import User
from zora_agent.core.errors import InvalidDevUserError
from zora_agent.core.repository_protocols import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MockUserProfile:
    id: str
    username: str
    display_name: str
    pro: bool = False
    token_gate_passed: bool = False


MOCK_USER_PROFILES = (
    MockUserProfile("guest_user", "guest", "Guest User"),
    MockUserProfile("free_user_1", "freeuser", "Free User"),
    MockUserProfile("pro_user_1", "prouser", "Pro User", pro=True),
    MockUserProfile("token_gate_user_1", "tokenuser", "Token Gate User", token_gate_passed=True),
)


class DevUserService:
    def __init__(self, users: UserRepository):
        self._users = users

    @property
    def profiles(self) -> tuple[MockUserProfile, ...]:
        return MOCK_USER_PROFILES

    def switch_to(self, profile_id: str | None) -> User:
        profile = next((p for p in MOCK_USER_PROFILES if p.id == profile_id), None)
        if profile is None:
            raise InvalidDevUserError(profile_id or "")
        existing = self._users.get(profile.id)
        if existing is None:
            user = self._users.create(User(
                id=profile.id,
                twitter_id=f"mock_{profile.id}",
                username=profile.username,
                display_name=profile.display_name,
                pro=profile.pro,
                token_gate_passed=profile.token_gate_passed,
            ))
        else:
            user = self._users.update(
                profile.id,
                display_name=profile.display_name,
                pro=profile.pro,
                token_gate_passed=profile.token_gate_passed,
            )
        logger.info(f"Switched to mock user {profile.id}", extra={"user_id": user.id})
        return user

    def update_flags(
        self, user_id: str, pro: bool | None = None, token_gate_passed: bool | None = None,
    ) -> User | None:
        fields = {}
        if pro is not None:
            fields["pro"] = pro
        if token_gate_passed is not None:
            fields["token_gate_passed"] = token_gate_passed
        return self._users.update(user_id, **fields)
