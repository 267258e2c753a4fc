"""Auth Routes — OAuth login start, callback and logout.

Invariants:
    - /auth/twitter stores state + PKCE verifier in the signed session cookie
    - The callback consumes them exactly once (popped before validation)
    - Any callback failure redirects to /login; success redirects to /analytics
    - Logout clears the whole session
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from zora_agent.api.dependencies import get_container, login_session
from zora_agent.core.errors import ZoraAgentError
from zora_agent.services.container import AppContainer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

OAUTH_STATE_KEY = "oauth_state"
OAUTH_VERIFIER_KEY = "oauth_code_verifier"


@router.get("/twitter")
async def twitter_login(
    request: Request, container: AppContainer = Depends(get_container),
):
    challenge = container.auth.begin_login()
    request.session[OAUTH_STATE_KEY] = challenge.state
    request.session[OAUTH_VERIFIER_KEY] = challenge.code_verifier
    return RedirectResponse(
        challenge.authorization_url, status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/twitter/callback")
async def twitter_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    container: AppContainer = Depends(get_container),
):
    expected_state = request.session.pop(OAUTH_STATE_KEY, None)
    verifier = request.session.pop(OAUTH_VERIFIER_KEY, None)
    if error:
        logger.warning(f"OAuth provider returned error: {error}")
        return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    try:
        user = await container.auth.complete_login(code, state, expected_state, verifier)
    except ZoraAgentError as e:
        logger.warning(f"Login failed: {e.message}", extra={"error_code": e.code})
        return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    login_session(request, user)
    return RedirectResponse("/analytics", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
