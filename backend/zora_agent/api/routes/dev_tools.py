"""Dev Tool Routes — user switcher for exercising guest/free/pro locally.

Invariants:
    - Registered by main.py only when ENVIRONMENT != production
    - userType=logout clears the session; userType=guest clears it and opens the
      dashboard as a guest; anything else switches to a mock profile by userId
    - update-user-flags requires a logged-in user (401 otherwise)
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from zora_agent.api.dependencies import (
    current_user, get_container, login_session, require_user,
)
from zora_agent.api.templating import render
from zora_agent.core.access_tier import resolve_access_tier, safe_user_data
from zora_agent.core.entities import User
from zora_agent.schemas.user import UserFlagsUpdate
from zora_agent.services.container import AppContainer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dev", tags=["dev"])


@router.get("/user-switcher")
async def user_switcher(
    request: Request,
    message: str | None = None,
    user: User | None = Depends(current_user),
    container: AppContainer = Depends(get_container),
):
    return render(request, "dev/user_switcher.html", {
        "mock_users": container.dev_users.profiles,
        "is_logged_in": user is not None,
        "message": message,
    }, user=user)


@router.post("/switch-user")
async def switch_user(
    request: Request,
    user_id: str | None = Form(None, alias="userId"),
    user_type: str | None = Form(None, alias="userType"),
    container: AppContainer = Depends(get_container),
):
    if user_type == "logout":
        request.session.clear()
        return RedirectResponse(
            "/dev/user-switcher?message=logged_out",
            status_code=status.HTTP_303_SEE_OTHER,
        )
    if user_type == "guest":
        request.session.clear()
        return RedirectResponse(
            "/analytics?guest=true", status_code=status.HTTP_303_SEE_OTHER,
        )
    user = container.dev_users.switch_to(user_id)
    login_session(request, user)
    return RedirectResponse(
        "/analytics?switched=true", status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/current-user")
async def get_current_user(user: User | None = Depends(current_user)):
    return {
        "isLoggedIn": user is not None,
        "user": safe_user_data(user),
        "accessLevel": resolve_access_tier(user).value,
    }


@router.post("/update-user-flags")
async def update_user_flags(
    body: UserFlagsUpdate,
    user: User = Depends(require_user),
    container: AppContainer = Depends(get_container),
):
    updated = container.dev_users.update_flags(
        user.id, pro=body.pro, token_gate_passed=body.token_gate_passed,
    )
    return {
        "success": True,
        "user": safe_user_data(updated),
        "accessLevel": resolve_access_tier(updated).value,
    }
