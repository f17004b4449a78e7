"""Identity business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.security import create_access_token, decode_token, hash_password, oauth2_scheme, verify_password
from app.modules.identity.models import AdminUser
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.schemas import AdminSession, LoginRequest
from app.shared.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)


class IdentityService:
    """Identity domain service."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def ensure_bootstrap_admin(self, email: str | None, password: str | None) -> AdminUser | None:
        """Create the configured bootstrap admin when it does not exist yet."""
        if not email or not password:
            return None

        admin = await self.repository.get_admin_by_email(email)
        if admin is not None:
            return admin

        admin = await self.repository.create_admin(
            email=email,
            password_hash=hash_password(password),
            full_name="Bootstrap admin",
        )
        logger.info("Created bootstrap admin %s", admin.email)
        return admin

    async def create_admin(self, email: str, password: str, full_name: str | None = None) -> AdminUser:
        """Create or reset an admin identity."""
        admin = await self.repository.get_admin_by_email(email)
        if admin is None:
            return await self.repository.create_admin(
                email=email,
                password_hash=hash_password(password),
                full_name=full_name,
            )

        admin.password_hash = hash_password(password)
        admin.is_active = True
        if full_name:
            admin.full_name = full_name
        return await self.repository.save(admin)

    async def login(self, payload: LoginRequest) -> AdminSession:
        """Authenticate admin and issue a session token."""
        admin = await self.repository.get_admin_by_email(payload.email)
        if admin is None or not verify_password(payload.password, admin.password_hash):
            logger.info("Rejected admin login for %s", payload.email)
            raise UnauthorizedException("Invalid credentials")

        if not admin.is_active:
            raise UnauthorizedException("Admin account is inactive")

        access_token, expires_at = create_access_token(subject=str(admin.id), email=admin.email)
        return AdminSession(access_token=access_token, email=admin.email, expires_at=expires_at)

    async def get_admin_from_access_token(self, token: str) -> AdminUser:
        """Resolve admin from access token, re-checking the admin list each call."""
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise UnauthorizedException("Invalid access token")

        subject = payload.get("sub")
        if not subject:
            raise UnauthorizedException("Token subject is missing")

        try:
            admin_id = UUID(subject)
        except ValueError as exc:
            raise UnauthorizedException("Invalid access token") from exc

        admin = await self.repository.get_admin_by_id(admin_id)
        if admin is None:
            raise UnauthorizedException("Admin not found")
        if not admin.is_active:
            raise UnauthorizedException("Admin account is inactive")

        return admin


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


async def get_current_admin(
    token: str = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> AdminUser:
    """Resolve currently signed-in admin from bearer token."""
    return await service.get_admin_from_access_token(token)
