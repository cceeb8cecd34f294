from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.auth import get_current_user
from app.core.jwt import create_access_token
from app.database.mongo import get_db
from app.domain.schemas.user import Token, UserCreate, UserLogin, UserOut
from app.services.users import authenticate_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(request: Request, user: dict[str, Any]) -> Token:
    settings = request.app.state.settings
    token = create_access_token(
        {"sub": str(user["_id"])},
        settings.JWT_SECRET,
        expires_delta=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    )
    return Token(access_token=token)


@router.post("/register", response_model=Token)
async def register(user: UserCreate, request: Request, db: AsyncIOMotorDatabase = Depends(get_db)) -> Token:
    created = await register_user(db, user)
    return _issue_token(request, created)


@router.post("/login", response_model=Token)
async def login(user: UserLogin, request: Request, db: AsyncIOMotorDatabase = Depends(get_db)) -> Token:
    found = await authenticate_user(db, user.email, user.password)
    return _issue_token(request, found)


@router.get("/me", response_model=UserOut)
async def me(current_user: dict[str, Any] = Depends(get_current_user)) -> UserOut:
    """
    Returns the current user. Requires JWT authentication.
    """
    return UserOut.from_document(current_user)
