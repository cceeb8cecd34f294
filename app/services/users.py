from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.errors import InternalError, NotFound, Unauthorized, ValidationError
from app.core.security import hash_password, verify_password
from app.database.mongo import USERS
from app.domain.schemas.user import UserCreate

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def _already_exists() -> ValidationError:
    return ValidationError([{"param": "email", "msg": "User already exists"}])


async def register_user(db: AsyncIOMotorDatabase, data: UserCreate) -> dict[str, Any]:
    try:
        if await db[USERS].find_one({"email": data.email}):
            raise _already_exists()
        doc = {
            "name": data.name,
            "email": data.email,
            "hashed_password": hash_password(data.password),
            "role": ROLE_USER,
            "createdAt": _utcnow(),
        }
        result = await db[USERS].insert_one(doc)
    except DuplicateKeyError:
        raise _already_exists() from None
    except PyMongoError as exc:
        logger.exception("Failed to register user email=%s", data.email)
        raise InternalError(f"register failed: {exc}") from exc
    doc["_id"] = result.inserted_id
    logger.info("Registered user id=%s", result.inserted_id)
    return doc


async def authenticate_user(db: AsyncIOMotorDatabase, email: str, password: str) -> dict[str, Any]:
    try:
        user = await db[USERS].find_one({"email": email.lower()})
    except PyMongoError as exc:
        logger.exception("Failed to look up user email=%s", email)
        raise InternalError(f"login failed: {exc}") from exc
    if not user or not verify_password(password, user.get("hashed_password", "")):
        raise Unauthorized("Invalid credentials")
    return user


async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: str) -> dict[str, Any] | None:
    if not ObjectId.is_valid(user_id):
        return None
    try:
        return await db[USERS].find_one({"_id": ObjectId(user_id)})
    except PyMongoError as exc:
        logger.exception("Failed to load user id=%s", user_id)
        raise InternalError(f"user lookup failed: {exc}") from exc


async def promote_to_admin(db: AsyncIOMotorDatabase, email: str) -> dict[str, Any]:
    user = await db[USERS].find_one_and_update(
        {"email": email.lower()},
        {"$set": {"role": ROLE_ADMIN}},
        return_document=ReturnDocument.AFTER,
    )
    if user is None:
        raise NotFound(f"No user with email {email}")
    logger.info("Promoted user id=%s to admin", user["_id"])
    return user
