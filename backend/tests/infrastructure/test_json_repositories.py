"""JSON Repositories — verifies file round-trips, upserts and history trimming.

Tests:
    - Missing files read as empty collections
    - Cards persist in camelCase and upsert by id, preserving order
    - Users: create, lookups by twitter/stripe ids, update bumps updated_at
    - History keeps at most max_points snapshots per card
    - Corrupt files raise StorageError
"""

import json

import pytest

from zora_agent.core.entities import MetricsSnapshot, User
from zora_agent.core.errors import StorageError
from zora_agent.infrastructure.json_repositories import (
    JsonCardRepository, JsonHistoryRepository, JsonUserRepository,
)


def test_missing_card_file_reads_empty(tmp_path):
    repo = JsonCardRepository(tmp_path / "analytics.json")
    assert repo.all() == []
    assert not repo.exists()
    assert repo.get("nope") is None


def test_cards_written_as_camel_case(tmp_path, make_card):
    path = tmp_path / "analytics.json"
    JsonCardRepository(path).replace_all([make_card("c1", change=4.5)])
    raw = json.loads(path.read_text())
    assert raw[0]["metrics"]["marketCapChange24h"] == 4.5
    assert raw[0]["aiRecommendation"]
    assert "riskLevel" in raw[0]


def test_save_many_upserts_in_place(tmp_path, make_card):
    repo = JsonCardRepository(tmp_path / "analytics.json")
    repo.replace_all([make_card("a"), make_card("b")])
    repo.save_many([make_card("b", volume=1), make_card("c")])
    cards = repo.all()
    assert [c.id for c in cards] == ["a", "b", "c"]
    assert repo.get("b").metrics.volume_24h == 1


def test_user_lookup_and_update(tmp_path):
    repo = JsonUserRepository(tmp_path / "users.json")
    user = repo.create(User(id="u1", twitter_id="tw1", username="a", display_name="A"))
    assert repo.find_by_twitter_id("tw1").id == "u1"
    updated = repo.update("u1", pro=True, stripe_customer_id="cus_1",
                          stripe_subscription_id="sub_1")
    assert updated.pro
    assert updated.updated_at >= user.updated_at
    assert repo.find_by_stripe_customer_id("cus_1").id == "u1"
    assert repo.find_by_stripe_subscription_id("sub_1").id == "u1"
    assert repo.get("u1").pro


def test_update_unknown_user_returns_none(tmp_path):
    assert JsonUserRepository(tmp_path / "users.json").update("ghost", pro=True) is None


def test_history_trimmed_to_max_points(tmp_path, make_card):
    repo = JsonHistoryRepository(tmp_path / "history.json", max_points=2)
    for volume in (1, 2, 3):
        card = make_card("c1", volume=volume)
        repo.append({"c1": MetricsSnapshot.of(card)})
    points = repo.for_card("c1")
    assert [p.volume_24h for p in points] == [2, 3]
    assert repo.for_card("unknown") == []


def test_corrupt_file_raises_storage_error(tmp_path):
    path = tmp_path / "analytics.json"
    path.write_text("{not json")
    with pytest.raises(StorageError):
        JsonCardRepository(path).all()
