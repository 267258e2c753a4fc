"""Billing Routes — checkout, provider webhook and the local mock checkout page.

Invariants:
    - /billing/webhook reads the raw body; the signature header name comes from
      the active payment provider; bad signature or payload → 400
    - Mock checkout routes 404 unless the mock payment provider is active
    - Mock "pay" goes through BillingService.handle_webhook, same as a real event
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from zora_agent.api.dependencies import current_user, get_container, require_user
from zora_agent.api.templating import render
from zora_agent.core.entities import User
from zora_agent.core.errors import ResourceNotFoundError
from zora_agent.services.container import AppContainer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("/checkout")
async def create_checkout(
    user: User = Depends(require_user),
    container: AppContainer = Depends(get_container),
):
    session = await container.billing.start_checkout(user)
    return RedirectResponse(session.url, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/webhook")
async def webhook(
    request: Request, container: AppContainer = Depends(get_container),
):
    payload = await request.body()
    signature = request.headers.get(container.billing.signature_header)
    user = container.billing.handle_webhook(payload, signature)
    return {"received": True, "userId": user.id if user else None}


@router.get("/success")
async def checkout_success(
    request: Request, user: User | None = Depends(current_user),
):
    return render(request, "checkout_success.html", user=user)


@router.get("/cancel")
async def checkout_cancel():
    return RedirectResponse(
        "/pricing?cancelled=true", status_code=status.HTTP_303_SEE_OTHER,
    )


# ─── Mock checkout ───────────────────────────────────────────────

@router.get("/mock-checkout/{session_id}")
async def mock_checkout_page(
    request: Request,
    session_id: str,
    user: User | None = Depends(current_user),
    container: AppContainer = Depends(get_container),
):
    if container.billing.mock_checkout_user(session_id) is None:
        raise ResourceNotFoundError("Checkout session", session_id)
    return render(request, "mock_checkout.html", {"session_id": session_id}, user=user)


@router.post("/mock-checkout/{session_id}")
async def mock_checkout_submit(
    session_id: str,
    action: Literal["pay", "cancel"] = Form(...),
    container: AppContainer = Depends(get_container),
):
    if action == "pay":
        container.billing.complete_mock_checkout(session_id)
        return RedirectResponse(
            f"/billing/success?session_id={session_id}",
            status_code=status.HTTP_303_SEE_OTHER,
        )
    container.billing.cancel_mock_checkout(session_id)
    return RedirectResponse("/billing/cancel", status_code=status.HTTP_303_SEE_OTHER)
