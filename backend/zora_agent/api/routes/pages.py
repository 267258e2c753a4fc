"""Page Routes — landing, pricing and login pages.

Invariants:
    - The landing page shows exactly what a guest would see (demo_cards)
    - /login redirects logged-in users to /analytics
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from zora_agent.api.dependencies import current_user, get_container
from zora_agent.api.templating import render
from zora_agent.core.entities import User
from zora_agent.services.container import AppContainer

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
async def landing_page(
    request: Request,
    user: User | None = Depends(current_user),
    container: AppContainer = Depends(get_container),
):
    return render(request, "index.html", {
        "demo_cards": [c.to_json_dict() for c in container.analytics.demo_cards()],
        "stats": container.analytics.market_stats(),
    }, user=user)


@router.get("/pricing", response_class=HTMLResponse)
async def pricing_page(
    request: Request,
    cancelled: bool = False,
    upgrade: str | None = None,
    user: User | None = Depends(current_user),
):
    return render(request, "pricing.html", {
        "cancelled": cancelled,
        "upgrade": upgrade,
    }, user=user)


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    user: User | None = Depends(current_user),
    container: AppContainer = Depends(get_container),
):
    if user is not None:
        return RedirectResponse("/analytics", status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "login.html", {
        "provider": container.auth.provider_name,
    })
