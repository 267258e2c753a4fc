"""Boundary Protocols — contracts between services and storage.

Invariants:
    - Services depend on these Protocols, never on a concrete storage class
    - Reads always reflect the current file contents (no caching layer)
    - Writes replace the whole collection (last write wins)

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Synchronous methods: storage is a local JSON file, callers are request handlers
      and a single periodic job
"""

from typing import Protocol

from zora_agent.core.entities import AnalyticsCard, MetricsSnapshot, User


class CardRepository(Protocol):
    """Contract for analytics card persistence."""
    def all(self) -> list[AnalyticsCard]: ...
    def get(self, card_id: str) -> AnalyticsCard | None: ...
    def save_many(self, cards: list[AnalyticsCard]) -> None: ...
    def replace_all(self, cards: list[AnalyticsCard]) -> None: ...
    def exists(self) -> bool: ...


class UserRepository(Protocol):
    """Contract for user persistence."""
    def get(self, user_id: str) -> User | None: ...
    def find_by_twitter_id(self, twitter_id: str) -> User | None: ...
    def find_by_stripe_customer_id(self, customer_id: str) -> User | None: ...
    def find_by_stripe_subscription_id(self, subscription_id: str) -> User | None: ...
    def create(self, user: User) -> User: ...
    def update(self, user_id: str, **fields: object) -> User | None: ...


class HistoryRepository(Protocol):
    """Contract for per-card metrics snapshots."""
    def for_card(self, card_id: str) -> list[MetricsSnapshot]: ...
    def append(self, snapshots: dict[str, MetricsSnapshot]) -> None: ...
