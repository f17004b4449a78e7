"""Identity repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.identity.models import AdminUser


class IdentityRepository:
    """DB operations for admin identities."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_admin_by_email(self, email: str) -> AdminUser | None:
        stmt = select(AdminUser).where(func.lower(AdminUser.email) == email.strip().lower())
        return await self.session.scalar(stmt)

    async def get_admin_by_id(self, admin_id: UUID) -> AdminUser | None:
        stmt = select(AdminUser).where(AdminUser.id == admin_id)
        return await self.session.scalar(stmt)

    async def create_admin(
        self,
        email: str,
        password_hash: str,
        full_name: str | None = None,
    ) -> AdminUser:
        admin = AdminUser(
            email=email.strip().lower(),
            password_hash=password_hash,
            full_name=full_name,
            is_active=True,
        )
        self.session.add(admin)
        await self.session.flush()
        return admin

    async def save(self, admin: AdminUser) -> AdminUser:
        await self.session.flush()
        return admin
