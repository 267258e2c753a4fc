"""Payment Providers — subscription checkout and webhook verification (Stripe or mock).

Invariants:
    - create_checkout_session() always sets client_reference_id = user id
    - construct_event() only returns events whose signature verified; otherwise
      WebhookVerificationError (bad signature or undecodable payload)
    - Provider SDK/transport failures surface as PaymentProviderError
    - Mock events are HMAC-SHA256 signed exactly like real webhooks are verified,
      so they travel through the same webhook handling path

Design Decisions:
    - ABC adapter interface with a MockPay-style implementation: pending sessions in
      memory, a local pay page, signed event emission
    - Stripe SDK calls are blocking; they run in a worker thread (asyncio.to_thread)
"""

import asyncio
import base64
import hashlib
import hmac
import json
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import stripe

from zora_agent.core.entities import User
from zora_agent.core.errors import (
    PaymentProviderError, ResourceNotFoundError, WebhookVerificationError,
)

logger = logging.getLogger(__name__)

MOCK_SIGNATURE_HEADER = "x-mockpay-signature"
STRIPE_SIGNATURE_HEADER = "stripe-signature"


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


@dataclass(frozen=True)
class WebhookEvent:
    """Provider-neutral webhook event: `data` is the event's data.object."""
    id: str
    type: str
    data: dict = field(default_factory=dict)


class PaymentProvider(ABC):
    name: str
    signature_header: str

    @abstractmethod
    async def create_checkout_session(
        self, user: User, success_url: str, cancel_url: str,
    ) -> CheckoutSession: ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str | None) -> WebhookEvent: ...


# ----------------------------
# MockPay implementation
# ----------------------------
class MockPaymentProvider(PaymentProvider):
    """Local checkout: a pay page emits signed checkout.session.completed events."""

    name = "mock"
    signature_header = MOCK_SIGNATURE_HEADER

    def __init__(self, secret: str, checkout_path: str = "/billing/mock-checkout"):
        self._secret = secret.encode()
        self.checkout_path = checkout_path
        # session id -> user id
        self._pending: dict[str, str] = {}

    async def create_checkout_session(
        self, user: User, success_url: str, cancel_url: str,
    ) -> CheckoutSession:
        session_id = f"cs_mock_{uuid.uuid4().hex}"
        self._pending[session_id] = user.id
        return CheckoutSession(
            id=session_id, url=f"{self.checkout_path}/{session_id}",
        )

    def pending_user_id(self, session_id: str) -> str | None:
        return self._pending.get(session_id)

    def cancel_session(self, session_id: str) -> None:
        self._pending.pop(session_id, None)

    def complete_session(self, session_id: str) -> tuple[bytes, str]:
        """Close a pending session; return (payload, signature) of its completion event."""
        user_id = self._pending.pop(session_id, None)
        if user_id is None:
            raise ResourceNotFoundError("Checkout session", session_id)
        return self.signed_event("checkout.session.completed", {
            "id": session_id,
            "object": "checkout.session",
            "client_reference_id": user_id,
            "customer": f"cus_mock_{user_id}",
            "subscription": f"sub_mock_{uuid.uuid4().hex[:16]}",
            "status": "complete",
        })

    def signed_event(self, event_type: str, obj: dict) -> tuple[bytes, str]:
        event = {
            "id": f"evt_mock_{uuid.uuid4().hex}",
            "type": event_type,
            "data": {"object": obj},
        }
        payload = json.dumps(event).encode()
        return payload, self.sign(payload)

    def sign(self, payload: bytes) -> str:
        mac = hmac.new(self._secret, payload, hashlib.sha256).digest()
        return base64.b64encode(mac).decode()

    def construct_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        if not signature or not hmac.compare_digest(self.sign(payload), signature):
            raise WebhookVerificationError("Invalid signature")
        try:
            event = json.loads(payload.decode())
            return WebhookEvent(
                id=event["id"], type=event["type"], data=event["data"]["object"],
            )
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as e:
            raise WebhookVerificationError("Invalid payload") from e


# ----------------------------
# Stripe implementation
# ----------------------------
class StripePaymentProvider(PaymentProvider):
    name = "stripe"
    signature_header = STRIPE_SIGNATURE_HEADER

    def __init__(self, secret_key: str, webhook_secret: str, price_id: str):
        if not secret_key or not price_id:
            raise PaymentProviderError("Stripe configuration missing")
        self._client = stripe.StripeClient(secret_key)
        self._webhook_secret = webhook_secret
        self.price_id = price_id

    async def create_checkout_session(
        self, user: User, success_url: str, cancel_url: str,
    ) -> CheckoutSession:
        params = {
            "mode": "subscription",
            "line_items": [{"price": self.price_id, "quantity": 1}],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": user.id,
        }
        if user.stripe_customer_id:
            params["customer"] = user.stripe_customer_id
        try:
            session = await asyncio.to_thread(
                self._client.checkout.sessions.create, params=params,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout creation failed: {e}")
            raise PaymentProviderError("checkout session creation failed") from e
        if not session.url:
            raise PaymentProviderError("checkout session has no URL")
        return CheckoutSession(id=session.id, url=session.url)

    def construct_event(self, payload: bytes, signature: str | None) -> WebhookEvent:
        try:
            event = stripe.Webhook.construct_event(
                payload, signature or "", self._webhook_secret,
            )
        except ValueError as e:
            raise WebhookVerificationError("Invalid payload") from e
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError("Invalid signature") from e
        return WebhookEvent(
            id=event["id"], type=event["type"], data=dict(event["data"]["object"]),
        )
