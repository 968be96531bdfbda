"""Pydantic schemas for the auth endpoints.

Learn: Request fields are all optional so the handler can answer a
missing field with the 400 envelope instead of FastAPI's 422. Response
models serialize camelCase (accessToken, refreshToken, createdAt) and
UserRead has no password field at all — there is nothing to forget
to strip.
"""

import uuid
from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel, Generic[T]):
    """{"status": ..., "message": ..., "data": ...} wrapper."""

    status: str = "Successful"
    message: str
    data: Optional[T] = None


# ─── Requests ───────────────────────────────────────────


class RegisterRequest(BaseModel):
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ─── Responses ──────────────────────────────────────────


class UserRead(CamelModel):
    id: uuid.UUID
    email: str
    firstname: str
    lastname: str
    fullname: str
    role: str
    created_at: datetime


class RegisterData(CamelModel):
    user: UserRead
    access_token: str
    refresh_token: str


class LoginData(CamelModel):
    user: UserRead
    refresh_token: str


class RefreshResponse(CamelModel):
    access_token: str
