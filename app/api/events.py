from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.auth import require_admin
from app.core.errors import NotFound
from app.database.mongo import get_db
from app.domain.schemas.event import EventOut
from app.services.events import seed, service
from app.services.events.query_builder import ExploreFilters, IndexFilters

router = APIRouter(prefix="/events", tags=["events"])


def require_test_data_enabled(request: Request) -> None:
    if not request.app.state.settings.test_data_enabled:
        raise NotFound("Not found")


@router.get("/index", response_model=list[EventOut])
async def list_index_events(
    limit: int = Query(..., ge=1),
    school: str | None = None,
    tags: str | None = None,
    featured: str | None = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> list[EventOut]:
    filters = IndexFilters(school=school, tags=tags, featured=featured, limit=limit)
    events = await service.list_for_index(db, filters)
    return [EventOut.from_document(event) for event in events]


@router.get("", response_model=list[EventOut])
async def list_explore_events(
    school: str | None = None,
    tags: str | None = None,
    featured: str | None = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> list[EventOut]:
    filters = ExploreFilters(school=school, tags=tags, featured=featured)
    events = await service.list_for_explore(db, filters)
    return [EventOut.from_document(event) for event in events]


@router.get("/test/generate-test-data", dependencies=[Depends(require_test_data_enabled)])
async def generate_test_data(request: Request, db: AsyncIOMotorDatabase = Depends(get_db)) -> dict[str, int]:
    async with request.app.state.seed_lock:
        return await seed.reset_with_synthetic_data(db)


@router.get("/{event_id}", response_model=EventOut)
async def get_event(event_id: str, db: AsyncIOMotorDatabase = Depends(get_db)) -> EventOut:
    return EventOut.from_document(await service.get_by_id(db, event_id))


@router.put("/feature/{event_id}", response_model=EventOut, dependencies=[Depends(require_admin)])
async def toggle_event_feature(event_id: str, db: AsyncIOMotorDatabase = Depends(get_db)) -> EventOut:
    return EventOut.from_document(await service.toggle_feature(db, event_id))


@router.post("", response_model=EventOut, dependencies=[Depends(require_admin)])
async def create_event(
    payload: dict[str, Any] = Body(...),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> EventOut:
    return EventOut.from_document(await service.create_event(db, payload))
