import asyncio
from collections import Counter
from datetime import date, datetime
import random

from mongomock_motor import AsyncMongoMockClient

from app.services.events import service
from app.services.events.query_builder import ExploreFilters
from app.services.events.seed import build_synthetic_events, default_anchor, reset_with_synthetic_data

ANCHOR = date(2026, 10, 20)
NOW = datetime(2026, 10, 18, 12, 0, 0)


def _make_db():
    return AsyncMongoMockClient()["seed_test"]


def test_synthetic_dataset_shape() -> None:
    events = build_synthetic_events(ANCHOR, rng=random.Random(7), now=NOW)

    regular = [event for event in events if not event["featured"]]
    featured = [event for event in events if event["featured"]]
    assert len(regular) == 18
    assert len(featured) == 16
    assert Counter(event["school"] for event in regular) == {"dornsife": 6, "viterbi": 12}
    assert Counter(event["school"] for event in featured) == {
        "viterbi": 4,
        "dornsife": 4,
        "annenberg": 4,
        "marshall": 4,
    }
    assert regular[0]["title"] == "Dornsife Event 1"
    assert regular[6]["title"] == "Viterbi Event 7"
    assert featured[0]["title"] == "Featured Viterbi Event 1"
    assert featured[-1]["title"] == "Featured Marshall Event 16"
    assert all(event["tags"] == ["WORKSHOP", "CAREER"] for event in events)


def test_first_regular_events_share_a_coordinate() -> None:
    events = build_synthetic_events(ANCHOR, rng=random.Random(7), now=NOW)

    coords = [(event["location"]["latitude"], event["location"]["longitude"]) for event in events[:5]]
    assert len(set(coords[:4])) == 1
    assert coords[4] != coords[0]


def test_synthetic_dates_follow_anchor_in_campus_time() -> None:
    events = build_synthetic_events(ANCHOR, rng=random.Random(1), now=NOW)

    # 16:30 PDT is 23:30 UTC
    assert events[0]["date"]["from"] == datetime(2026, 10, 20, 23, 30)
    assert events[0]["date"]["to"] == datetime(2026, 10, 21, 1, 30)
    # day 12 falls after the switch to PST
    assert events[12]["date"]["from"] == datetime(2026, 11, 2, 0, 30)
    # featured event 0 starts nine days after the anchor
    assert events[18]["date"]["from"] == datetime(2026, 10, 29, 23, 30)


def test_default_anchor_is_tomorrow_on_campus() -> None:
    assert default_anchor(datetime(2026, 10, 18, 12, 0)) == date(2026, 10, 19)
    # 03:00 UTC is still the previous evening in Los Angeles
    assert default_anchor(datetime(2026, 10, 19, 3, 0)) == date(2026, 10, 19)


def test_reset_replaces_existing_events() -> None:
    db = _make_db()
    asyncio.run(db.events.insert_many([{"title": "old"}, {"title": "older"}]))

    stats = asyncio.run(reset_with_synthetic_data(db, rng=random.Random(3), anchor=ANCHOR))

    assert stats == {"deleted": 2, "created": 34}
    assert asyncio.run(db.events.count_documents({"title": "old"})) == 0


def test_reset_then_featured_viterbi_explore_returns_four_sorted() -> None:
    db = _make_db()
    asyncio.run(reset_with_synthetic_data(db, rng=random.Random(3), anchor=ANCHOR))

    events = asyncio.run(service.list_for_explore(db, ExploreFilters(school="viterbi", featured="true"), now=NOW))

    assert [event["title"] for event in events] == [f"Featured Viterbi Event {n}" for n in range(1, 5)]
    starts = [event["date"]["from"] for event in events]
    assert starts == sorted(starts)
