"""Auth Service — OAuth login flow and user provisioning.

Invariants:
    - A login only completes when the callback state equals the state stored at start
    - Users are matched by twitter_id: first login creates, later logins refresh
      the profile fields and keep pro/token-gate/billing fields untouched
    - Provider failures surface as IdentityProviderError; state mismatch as
      AuthenticationRequiredError

Design Decisions:
    - Session storage is the route's concern: begin_login returns what must be
      remembered (LoginChallenge), complete_login receives it back
"""

import logging
import secrets
import uuid
from dataclasses import dataclass

from zora_agent.core.entities import User
from zora_agent.core.errors import AuthenticationRequiredError
from zora_agent.core.repository_protocols import UserRepository
from zora_agent.infrastructure.identity_provider import (
    IdentityProfile, IdentityProvider, new_pkce_pair,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginChallenge:
    authorization_url: str
    state: str
    code_verifier: str


class AuthService:
    def __init__(self, users: UserRepository, identity: IdentityProvider):
        self._users = users
        self._identity = identity

    @property
    def provider_name(self) -> str:
        return self._identity.name

    def begin_login(self) -> LoginChallenge:
        state = secrets.token_urlsafe(24)
        verifier, challenge = new_pkce_pair()
        return LoginChallenge(
            authorization_url=self._identity.authorization_url(state, challenge),
            state=state,
            code_verifier=verifier,
        )

    async def complete_login(
        self,
        code: str | None,
        state: str | None,
        expected_state: str | None,
        code_verifier: str | None,
    ) -> User:
        if not code or not state or not expected_state or not code_verifier:
            logger.warning("Login callback is missing parameters")
            raise AuthenticationRequiredError()
        if not secrets.compare_digest(state, expected_state):
            logger.warning("Login state mismatch")
            raise AuthenticationRequiredError()
        profile = await self._identity.fetch_profile(code, code_verifier)
        user = self.upsert_from_profile(profile)
        logger.info(
            f"User logged in via {self._identity.name}",
            extra={"user_id": user.id},
        )
        return user

    def upsert_from_profile(self, profile: IdentityProfile) -> User:
        existing = self._users.find_by_twitter_id(profile.id)
        if existing is not None:
            return self._users.update(
                existing.id,
                username=profile.username,
                display_name=profile.display_name,
                profile_image=profile.profile_image,
            )
        return self._users.create(User(
            id=str(uuid.uuid4()),
            twitter_id=profile.id,
            username=profile.username,
            display_name=profile.display_name,
            profile_image=profile.profile_image,
        ))

    def get_user(self, user_id: str | None) -> User | None:
        if not user_id:
            return None
        return self._users.get(user_id)
