"""Identity API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.identity.schemas import AdminSession, AdminUserRead, LoginRequest
from app.modules.identity.service import IdentityService, get_current_admin, get_identity_service

router = APIRouter(prefix="/identity", tags=["identity"])


@router.post("/auth/login", response_model=AdminSession)
async def login(
    payload: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
) -> AdminSession:
    """Sign in by email/password and return an admin session."""
    return await service.login(payload)


@router.get("/me", response_model=AdminUserRead)
async def get_me(current_admin=Depends(get_current_admin)) -> AdminUserRead:
    """Return profile of the signed-in admin."""
    return AdminUserRead.model_validate(current_admin)
