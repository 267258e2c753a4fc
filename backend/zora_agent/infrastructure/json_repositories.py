"""JSON Repositories — card, user and history persistence on top of JsonFileStore.

Invariants:
    - Every read parses the file again; every write rewrites the whole file
    - Files hold camelCase JSON (CamelModel.to_json_dict)
    - update() bumps updated_at; unknown ids return None instead of raising
    - History keeps at most `max_points` snapshots per card (oldest dropped first)
"""

import logging
from pathlib import Path

from zora_agent.core.entities import (
    AnalyticsCard, MetricsSnapshot, User, utc_now,
)
from zora_agent.infrastructure.json_store import JsonFileStore

logger = logging.getLogger(__name__)

CARDS_FILE = "analytics.json"
USERS_FILE = "users.json"
HISTORY_FILE = "history.json"


class JsonCardRepository:
    """Analytics cards stored as one JSON array."""

    def __init__(self, path: Path):
        self._store = JsonFileStore(path)

    def exists(self) -> bool:
        return self._store.exists()

    def all(self) -> list[AnalyticsCard]:
        return [AnalyticsCard.model_validate(raw) for raw in self._store.read([])]

    def get(self, card_id: str) -> AnalyticsCard | None:
        return next((c for c in self.all() if c.id == card_id), None)

    def replace_all(self, cards: list[AnalyticsCard]) -> None:
        self._store.write([c.to_json_dict() for c in cards])

    def save_many(self, cards: list[AnalyticsCard]) -> None:
        """Upsert by id, keeping file order for existing cards."""
        current = self.all()
        index = {c.id: i for i, c in enumerate(current)}
        for card in cards:
            if card.id in index:
                current[index[card.id]] = card
            else:
                index[card.id] = len(current)
                current.append(card)
        self.replace_all(current)


class JsonUserRepository:
    """Users stored as one JSON array."""

    def __init__(self, path: Path):
        self._store = JsonFileStore(path)

    def _read(self) -> list[User]:
        return [User.model_validate(raw) for raw in self._store.read([])]

    def _write(self, users: list[User]) -> None:
        self._store.write([u.to_json_dict() for u in users])

    def _find(self, attr: str, value: str) -> User | None:
        return next((u for u in self._read() if getattr(u, attr) == value), None)

    def get(self, user_id: str) -> User | None:
        return self._find("id", user_id)

    def find_by_twitter_id(self, twitter_id: str) -> User | None:
        return self._find("twitter_id", twitter_id)

    def find_by_stripe_customer_id(self, customer_id: str) -> User | None:
        return self._find("stripe_customer_id", customer_id)

    def find_by_stripe_subscription_id(self, subscription_id: str) -> User | None:
        return self._find("stripe_subscription_id", subscription_id)

    def create(self, user: User) -> User:
        users = self._read()
        users.append(user)
        self._write(users)
        return user

    def update(self, user_id: str, **fields: object) -> User | None:
        users = self._read()
        for i, user in enumerate(users):
            if user.id == user_id:
                users[i] = user.model_copy(
                    update={**fields, "updated_at": utc_now()},
                )
                self._write(users)
                return users[i]
        return None


class JsonHistoryRepository:
    """Metrics snapshots stored as {card_id: [snapshot, ...]}."""

    def __init__(self, path: Path, max_points: int = 48):
        self._store = JsonFileStore(path)
        self.max_points = max_points

    def for_card(self, card_id: str) -> list[MetricsSnapshot]:
        raw = self._store.read({}).get(card_id, [])
        return [MetricsSnapshot.model_validate(s) for s in raw]

    def append(self, snapshots: dict[str, MetricsSnapshot]) -> None:
        data = self._store.read({})
        for card_id, snap in snapshots.items():
            series = data.get(card_id, [])
            series.append(snap.to_json_dict())
            data[card_id] = series[-self.max_points:]
        self._store.write(data)
