from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: Literal["user", "admin"] = "user"
    createdAt: datetime | None = None

    @field_validator("createdAt")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "UserOut":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc["email"],
            role=doc.get("role", "user"),
            createdAt=doc.get("createdAt"),
        )


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
