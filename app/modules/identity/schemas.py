"""Identity schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr


class LoginRequest(BaseModel):
    """Credentials for admin sign-in."""

    email: EmailStr
    password: str


class AdminSession(BaseModel):
    """Explicit session handed to the client after sign-in."""

    access_token: str
    token_type: str = "bearer"
    email: EmailStr
    expires_at: datetime


class AdminUserRead(BaseModel):
    """Admin profile output schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    full_name: str | None
    is_active: bool
    created_at: datetime
