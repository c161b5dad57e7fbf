from __future__ import annotations

import pytest

from dining_backend.ledger.errors import InvalidInputError
from dining_backend.ledger.hearts import record_heart
from dining_backend.recommendations.config import RecommenderConfig
from dining_backend.recommendations.retrieval import get_recommendations


def _at(clock, days=0, hours=0, minutes=0):
    clock.advance(days=days, hours=hours, minutes=minutes)


def test_no_hearts_no_recommendations(store):
    assert get_recommendations(store, "u1", 1, "12:00") == []


def test_other_users_hearts_are_ignored(store):
    record_heart(store, "someone-else", "venue", 1, "like")
    assert get_recommendations(store, "u1", 1, "12:00") == []


def test_single_venue_heart(store):
    record_heart(store, "u1", "venue", 7, "like")
    recs = get_recommendations(store, "u1", 1, "12:05")
    assert [r.venue_id for r in recs] == [7]
    assert recs[0].confidence == pytest.approx(1.0)
    assert recs[0].reason == "100.0% match based on your time preferences"


def test_breakfast_and_dinner_venues(store, clock):
    # Monday 08:00 at venue 1, Monday 20:00 at venue 2
    _at(clock, hours=-4)
    record_heart(store, "u1", "venue", 1, "like")
    _at(clock, hours=12)
    record_heart(store, "u1", "venue", 2, "like")

    morning = get_recommendations(store, "u1", 1, "08:10")
    assert [r.venue_id for r in morning] == [1, 2]

    evening = get_recommendations(store, "u1", 1, "19:45")
    assert [r.venue_id for r in evening] == [2, 1]


def test_history_and_today_are_combined(store, clock):
    record_heart(store, "u1", "venue", 1, "like")
    _at(clock, days=1)
    record_heart(store, "u1", "venue", 2, "like")

    recs = get_recommendations(store, "u1", 2, "12:00")
    assert {r.venue_id for r in recs} == {1, 2}
    # Today's heart is an exact match, so it ranks first.
    assert recs[0].venue_id == 2


def test_menu_item_hearts_recommend_their_venue(store):
    record_heart(store, "u1", "menu_item", "bagel", "like", context_venue_id=5)
    recs = get_recommendations(store, "u1", 1, "12:00")
    assert [r.venue_id for r in recs] == [5]


def test_venue_hearts_outweigh_menu_item_hearts(store):
    record_heart(store, "u1", "venue", 1, "like")
    record_heart(store, "u1", "menu_item", "bagel", "like", context_venue_id=2)

    recs = get_recommendations(store, "u1", 1, "12:00")
    assert [r.venue_id for r in recs] == [1, 2]
    assert recs[0].confidence == pytest.approx(2 / 3)
    assert sum(r.confidence for r in recs) == pytest.approx(1.0)


def test_menu_hearts_without_venue_give_nothing(store):
    record_heart(store, "u1", "menu_item", "mystery", "like")
    assert get_recommendations(store, "u1", 1, "12:00") == []


def test_at_most_three_by_default(store):
    for venue_id in range(1, 6):
        record_heart(store, "u1", "venue", venue_id, "like")
    recs = get_recommendations(store, "u1", 1, "12:00")
    assert len(recs) == 3
    confidences = [r.confidence for r in recs]
    assert confidences == sorted(confidences, reverse=True)


def test_custom_count_and_config(store):
    for venue_id in range(1, 6):
        record_heart(store, "u1", "venue", venue_id, "like")
    config = RecommenderConfig(venue_k=2, top_count=10)
    recs = get_recommendations(store, "u1", 1, "12:00", config=config)
    # Only two neighbours vote.
    assert [r.venue_id for r in recs] == [1, 2]


@pytest.mark.parametrize(
    "user_id, day, time_of_day",
    [
        ("", 1, "12:00"),
        ("   ", 1, "12:00"),
        (None, 1, "12:00"),
        ("u1", 7, "12:00"),
        ("u1", -1, "12:00"),
        ("u1", 1, "lunch"),
    ],
)
def test_rejects_malformed_request(store, user_id, day, time_of_day):
    with pytest.raises(InvalidInputError):
        get_recommendations(store, user_id, day, time_of_day)
