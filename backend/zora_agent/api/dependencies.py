"""Route Dependencies — container access, session user, tier and rate limiting.

Invariants:
    - The logged-in user is whatever user_id the signed session cookie holds;
      a stale id (user deleted from users.json) is treated as logged out
    - require_user raises AuthenticationRequiredError (401 / redirect to /login)
    - enforce_rate_limit keys on the client IP and raises RateLimitExceededError (429)
"""

from fastapi import Depends, Request

from zora_agent.core.access_tier import resolve_access_tier
from zora_agent.core.domain_types import AccessTier
from zora_agent.core.entities import User
from zora_agent.core.errors import AuthenticationRequiredError, RateLimitExceededError
from zora_agent.services.container import AppContainer

SESSION_USER_KEY = "user_id"


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def current_user(
    request: Request, container: AppContainer = Depends(get_container),
) -> User | None:
    user = container.auth.get_user(request.session.get(SESSION_USER_KEY))
    request.state.user_id = user.id if user else None
    return user


def access_tier(user: User | None = Depends(current_user)) -> AccessTier:
    return resolve_access_tier(user)


def require_user(user: User | None = Depends(current_user)) -> User:
    if user is None:
        raise AuthenticationRequiredError()
    return user


def login_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(
    request: Request, container: AppContainer = Depends(get_container),
) -> None:
    decision = container.rate_limiter.hit(client_ip(request))
    if not decision.allowed:
        raise RateLimitExceededError(decision.retry_after_seconds)
