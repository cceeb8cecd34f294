from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.errors import Forbidden, Unauthorized
from app.core.jwt import verify_access_token
from app.database.mongo import get_db
from app.services.users import ROLE_ADMIN, get_user_by_id

# auto_error is off so a missing token goes through the Unauthorized error path
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def _resolve_user(token: Optional[str], request: Request, db: AsyncIOMotorDatabase) -> dict[str, Any]:
    if not token:
        raise Unauthorized("No token, authorization denied")
    payload = verify_access_token(token, request.app.state.settings.JWT_SECRET)
    if payload is None:
        raise Unauthorized("Invalid or expired token")
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid token")
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise Unauthorized("Invalid token")
    return user


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> dict[str, Any]:
    return await _resolve_user(token, request, db)


async def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> Optional[dict[str, Any]]:
    if not token:
        return None
    try:
        return await _resolve_user(token, request, db)
    except Unauthorized:
        return None


def is_admin(user: Optional[dict[str, Any]]) -> bool:
    return bool(user) and user.get("role") == ROLE_ADMIN


async def require_admin(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    if not is_admin(current_user):
        raise Forbidden("Admin access required")
    return current_user
