"""Synthetic event data for development databases.

``reset_with_synthetic_data`` wipes the whole events collection, so it must
never run concurrently with other event writes and must stay behind the
``ALLOW_TEST_DATA`` guard outside production.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import logging
import random
from typing import Any
from zoneinfo import ZoneInfo

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.errors import InternalError
from app.database.mongo import EVENTS

logger = logging.getLogger(__name__)

CAMPUS_TZ = ZoneInfo("America/Los_Angeles")
CAMPUS_LAT = 34.02176870202642
CAMPUS_LNG = -118.28651879471587
JITTER = 0.005
START_TIME = time(16, 30)
DURATION = timedelta(hours=2)

DESCRIPTION = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud "
    "exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat."
)
THUMBNAIL_URL = "https://dummyimage.com/600x400/000/fff"
ROOM = "Taper Hall 112"
ADDRESS = "1015 W 34st, LA 90089"
TAGS = ["WORKSHOP", "CAREER"]


@dataclass(frozen=True)
class Cohort:
    title: str
    school: str
    size: int
    featured: bool


REGULAR_COHORTS = (
    Cohort("Dornsife Event", "dornsife", 6, featured=False),
    Cohort("Viterbi Event", "viterbi", 12, featured=False),
)
FEATURED_COHORTS = (
    Cohort("Featured Viterbi Event", "viterbi", 4, featured=True),
    Cohort("Featured Dornsife Event", "dornsife", 4, featured=True),
    Cohort("Featured Annenberg Event", "annenberg", 4, featured=True),
    Cohort("Featured Marshall Event", "marshall", 4, featured=True),
)
FEATURED_DAY_OFFSET = 9
SHARED_COORDINATE_COUNT = 4


def _slot(anchor: date, day_offset: int) -> tuple[datetime, datetime]:
    local_start = datetime.combine(anchor + timedelta(days=day_offset), START_TIME, tzinfo=CAMPUS_TZ)
    start = local_start.astimezone(timezone.utc).replace(tzinfo=None)
    return start, start + DURATION


def _jittered(rng: random.Random) -> tuple[float, float]:
    return (
        CAMPUS_LAT + rng.uniform(-JITTER, JITTER),
        CAMPUS_LNG + rng.uniform(-JITTER, JITTER),
    )


def _expand(cohorts: tuple[Cohort, ...]) -> list[Cohort]:
    return [cohort for cohort in cohorts for _ in range(cohort.size)]


def _event(
    title: str,
    school: str,
    featured: bool,
    coord: tuple[float, float],
    slot: tuple[datetime, datetime],
    now: datetime,
) -> dict[str, Any]:
    lat, lng = coord
    start, end = slot
    return {
        "title": title,
        "description": DESCRIPTION,
        "location": {"room": ROOM, "address": ADDRESS, "latitude": lat, "longitude": lng},
        "date": {"from": start, "to": end, "multiDay": False},
        "thumbnailUrl": THUMBNAIL_URL,
        "school": school,
        "tags": list(TAGS),
        "featured": featured,
        "rsvpLink": None,
        "createdAt": now,
    }


def build_synthetic_events(
    anchor: date,
    rng: random.Random | None = None,
    shared_coordinate_count: int = SHARED_COORDINATE_COUNT,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Build the development dataset.

    Regular event ``i`` (0-based) starts on ``anchor + i`` days and the first
    ``shared_coordinate_count`` of them share one coordinate. Featured event
    ``i`` starts on ``anchor + i + 9`` days. Titles are numbered within each
    group, from 1.
    """
    rng = rng or random.Random()
    created_at = now or datetime.now(tz=timezone.utc).replace(tzinfo=None)
    events: list[dict[str, Any]] = []

    shared = _jittered(rng)
    for i, cohort in enumerate(_expand(REGULAR_COHORTS)):
        coord = shared if i < shared_coordinate_count else _jittered(rng)
        events.append(_event(f"{cohort.title} {i + 1}", cohort.school, cohort.featured, coord, _slot(anchor, i), created_at))

    for i, cohort in enumerate(_expand(FEATURED_COHORTS)):
        slot = _slot(anchor, i + FEATURED_DAY_OFFSET)
        events.append(_event(f"{cohort.title} {i + 1}", cohort.school, cohort.featured, _jittered(rng), slot, created_at))

    return events


def default_anchor(now: datetime | None = None) -> date:
    current = now or datetime.now(tz=timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(CAMPUS_TZ).date() + timedelta(days=1)


async def reset_with_synthetic_data(
    db: AsyncIOMotorDatabase,
    rng: random.Random | None = None,
    anchor: date | None = None,
    now: datetime | None = None,
) -> dict[str, int]:
    events = build_synthetic_events(anchor or default_anchor(now), rng=rng)
    try:
        deleted = await db[EVENTS].delete_many({})
        result = await db[EVENTS].insert_many(events)
    except PyMongoError as exc:
        logger.exception("Synthetic data reset failed")
        raise InternalError(f"synthetic reset failed: {exc}") from exc
    stats = {"deleted": deleted.deleted_count, "created": len(result.inserted_ids)}
    logger.warning("Events collection reset with synthetic data deleted=%s created=%s", stats["deleted"], stats["created"])
    return stats
