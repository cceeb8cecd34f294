import asyncio
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
import uvicorn

from app.api import auth, events, pages
from app.config import Settings, settings as default_settings
from app.core.errors import register_exception_handlers
from app.database.mongo import create_client, ensure_indexes, get_database, get_db
from app.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, client: Optional[AsyncIOMotorClient] = None) -> FastAPI:
    settings = settings or default_settings
    owns_client = client is None
    client = client or create_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        try:
            await ensure_indexes(app.state.db)
        except PyMongoError:
            logger.exception("Startup failed: could not prepare MongoDB indexes")
            raise
        if settings.test_data_enabled:
            logger.warning("Test data endpoint is enabled env=%s", settings.ENV)
        yield
        if owns_client:
            client.close()

    app = FastAPI(
        title="Campus Events API",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = get_database(client, settings)
    app.state.seed_lock = asyncio.Lock()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(events.router)
    app.include_router(pages.router)

    @app.get("/ping")
    async def ping():
        return {"message": "pong"}

    @app.get("/dbtest")
    async def test_db(db: AsyncIOMotorDatabase = Depends(get_db)):
        try:
            collections = await db.list_collection_names()
            return {"status": "connected", "collections": sorted(collections)}
        except PyMongoError as e:
            logger.warning("Database check failed: %s", e)
            return {"status": "error", "details": "database unavailable"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
