from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from app.core.auth import get_optional_user
from app.core.pages import resolve_page

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("/resolve")
async def resolve(
    path: str = Query(..., min_length=1),
    user: Optional[dict[str, Any]] = Depends(get_optional_user),
) -> dict[str, Any]:
    return asdict(resolve_page(path, user))
