"""Billing Service — subscription checkout and webhook-driven pro status.

Invariants:
    - Pro status changes only through verified webhook events (mock checkout
      included: it emits a signed event and feeds it through handle_webhook)
    - checkout.session.completed → pro=True, customer/subscription ids recorded
    - customer.subscription.updated → pro follows the subscription status
    - customer.subscription.deleted → pro=False
    - Events for unknown users and unknown event types are logged and ignored

Design Decisions:
    - Event handlers in a dispatch dict keyed by event type
    - Statuses outside ACTIVE/INACTIVE (past_due, incomplete) leave pro unchanged
"""

import logging

from zora_agent.core.entities import User
from zora_agent.core.errors import ResourceNotFoundError
from zora_agent.core.repository_protocols import UserRepository
from zora_agent.infrastructure.payment_provider import (
    CheckoutSession, MockPaymentProvider, PaymentProvider, WebhookEvent,
)

logger = logging.getLogger(__name__)

ACTIVE_SUBSCRIPTION_STATUSES = frozenset({"active", "trialing"})
INACTIVE_SUBSCRIPTION_STATUSES = frozenset({"canceled", "unpaid", "incomplete_expired"})


class BillingService:
    def __init__(
        self, users: UserRepository, payments: PaymentProvider, base_url: str = "",
    ):
        self._users = users
        self._payments = payments
        self._base_url = base_url.rstrip("/")
        self._handlers = {
            "checkout.session.completed": self._on_checkout_completed,
            "customer.subscription.updated": self._on_subscription_updated,
            "customer.subscription.deleted": self._on_subscription_deleted,
        }

    @property
    def payments(self) -> PaymentProvider:
        return self._payments

    @property
    def is_mock(self) -> bool:
        return isinstance(self._payments, MockPaymentProvider)

    @property
    def signature_header(self) -> str:
        return self._payments.signature_header

    async def start_checkout(self, user: User) -> CheckoutSession:
        session = await self._payments.create_checkout_session(
            user,
            success_url=f"{self._base_url}/billing/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self._base_url}/billing/cancel",
        )
        logger.info(
            f"Checkout session {session.id} created via {self._payments.name}",
            extra={"user_id": user.id},
        )
        return session

    def handle_webhook(self, payload: bytes, signature: str | None) -> User | None:
        """Verify, then apply. Returns the user whose status changed, if any."""
        event = self._payments.construct_event(payload, signature)
        return self.apply_event(event)

    def apply_event(self, event: WebhookEvent) -> User | None:
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info(
                f"Ignoring webhook event {event.type}", extra={"event_type": event.type},
            )
            return None
        return handler(event.data)

    # ─── Mock checkout ───────────────────────────────────────────

    def mock_checkout_user(self, session_id: str) -> str | None:
        if not self.is_mock:
            return None
        return self._payments.pending_user_id(session_id)

    def complete_mock_checkout(self, session_id: str) -> User | None:
        if not self.is_mock:
            raise ResourceNotFoundError("Checkout session", session_id)
        payload, signature = self._payments.complete_session(session_id)
        return self.handle_webhook(payload, signature)

    def cancel_mock_checkout(self, session_id: str) -> None:
        if not self.is_mock:
            raise ResourceNotFoundError("Checkout session", session_id)
        self._payments.cancel_session(session_id)

    # ─── Event handlers ──────────────────────────────────────────

    def _on_checkout_completed(self, obj: dict) -> User | None:
        user_id = obj.get("client_reference_id")
        if not user_id or self._users.get(user_id) is None:
            logger.warning(f"Checkout completed for unknown user {user_id!r}")
            return None
        user = self._users.update(
            user_id,
            pro=True,
            stripe_customer_id=obj.get("customer"),
            stripe_subscription_id=obj.get("subscription"),
        )
        logger.info("User upgraded to pro", extra={"user_id": user_id})
        return user

    def _on_subscription_updated(self, obj: dict) -> User | None:
        user = self._find_subscriber(obj)
        if user is None:
            return None
        status = obj.get("status")
        if status in ACTIVE_SUBSCRIPTION_STATUSES:
            pro = True
        elif status in INACTIVE_SUBSCRIPTION_STATUSES:
            pro = False
        else:
            logger.info(
                f"Subscription status {status!r} leaves pro unchanged",
                extra={"user_id": user.id},
            )
            return user
        logger.info(
            f"Subscription {status}: pro={pro}", extra={"user_id": user.id},
        )
        return self._users.update(
            user.id, pro=pro, stripe_subscription_id=obj.get("id"),
        )

    def _on_subscription_deleted(self, obj: dict) -> User | None:
        user = self._find_subscriber(obj)
        if user is None:
            return None
        logger.info("Subscription deleted, pro revoked", extra={"user_id": user.id})
        return self._users.update(user.id, pro=False)

    def _find_subscriber(self, obj: dict) -> User | None:
        user = None
        if obj.get("id"):
            user = self._users.find_by_stripe_subscription_id(obj["id"])
        if user is None and obj.get("customer"):
            user = self._users.find_by_stripe_customer_id(obj["customer"])
        if user is None:
            logger.warning(f"No user for subscription {obj.get('id')!r}")
        return user
