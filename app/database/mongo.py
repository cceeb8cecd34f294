import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.config import Settings

logger = logging.getLogger(__name__)

EVENTS = "events"
USERS = "users"


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """Create a MongoDB client for the configured URI."""
    return AsyncIOMotorClient(settings.MONGO_URI, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    return client[settings.MONGO_DB]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    await db[EVENTS].create_index([("date.from", ASCENDING)])
    await db[EVENTS].create_index([("school", ASCENDING), ("date.from", ASCENDING)])
    await db[USERS].create_index([("email", ASCENDING)], unique=True)
    logger.info("MongoDB indexes ensured db=%s", db.name)


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the database bound to this application."""
    return request.app.state.db
