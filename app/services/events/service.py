from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.core.errors import InternalError, NotFound, ValidationError, errors_from_pydantic
from app.database.mongo import EVENTS
from app.domain.schemas.event import EventCreate
from app.services.events.query_builder import (
    EventQuery,
    ExploreFilters,
    IndexFilters,
    build_explore_query,
    build_index_query,
)

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND = "Event not found"


def utcnow() -> datetime:
    """Current instant as naive UTC, the form pymongo returns stored datetimes in."""
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def _as_store_time(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


async def run_query(db: AsyncIOMotorDatabase, query: EventQuery) -> list[dict[str, Any]]:
    try:
        # limit=0 means "no limit" to MongoDB
        cursor = db[EVENTS].find(query.filter, sort=query.sort, limit=query.limit or 0)
        return await cursor.to_list(length=None)
    except PyMongoError as exc:
        logger.exception("Event query failed filter=%s", query.filter)
        raise InternalError(f"event query failed: {exc}") from exc


async def list_for_index(
    db: AsyncIOMotorDatabase,
    filters: IndexFilters,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    query = build_index_query(filters, _as_store_time(now or utcnow()))
    return await run_query(db, query)


async def list_for_explore(
    db: AsyncIOMotorDatabase,
    filters: ExploreFilters,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    query = build_explore_query(filters, _as_store_time(now or utcnow()))
    return await run_query(db, query)


def _object_id(event_id: str) -> ObjectId:
    if not ObjectId.is_valid(event_id):
        raise NotFound(EVENT_NOT_FOUND)
    return ObjectId(event_id)


async def get_by_id(db: AsyncIOMotorDatabase, event_id: str) -> dict[str, Any]:
    oid = _object_id(event_id)
    try:
        event = await db[EVENTS].find_one({"_id": oid})
    except PyMongoError as exc:
        logger.exception("Failed to load event id=%s", event_id)
        raise InternalError(f"event lookup failed: {exc}") from exc
    if event is None:
        raise NotFound(EVENT_NOT_FOUND)
    return event


def validate_event(payload: dict[str, Any]) -> EventCreate:
    try:
        return EventCreate.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(errors_from_pydantic(exc.errors())) from None


async def create_event(
    db: AsyncIOMotorDatabase,
    payload: dict[str, Any],
    now: datetime | None = None,
) -> dict[str, Any]:
    event = validate_event(payload)
    doc = event.to_document(_as_store_time(now or utcnow()))
    try:
        result = await db[EVENTS].insert_one(doc)
    except PyMongoError as exc:
        logger.exception("Failed to create event title=%s", event.title)
        raise InternalError(f"event insert failed: {exc}") from exc
    doc["_id"] = result.inserted_id
    logger.info("Created event id=%s featured=%s school=%s", result.inserted_id, event.featured, doc["school"])
    return doc


async def toggle_feature(db: AsyncIOMotorDatabase, event_id: str) -> dict[str, Any]:
    current = await get_by_id(db, event_id)
    try:
        updated = await db[EVENTS].find_one_and_update(
            {"_id": current["_id"]},
            {"$set": {"featured": not current.get("featured", False)}},
            return_document=ReturnDocument.AFTER,
        )
    except PyMongoError as exc:
        logger.exception("Failed to toggle featured id=%s", event_id)
        raise InternalError(f"feature toggle failed: {exc}") from exc
    if updated is None:
        raise NotFound(EVENT_NOT_FOUND)
    logger.info("Toggled featured id=%s featured=%s", event_id, updated.get("featured"))
    return updated
