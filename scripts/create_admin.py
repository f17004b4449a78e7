"""Create or reset an admin identity allowed into the review flow."""

from __future__ import annotations

import argparse
import asyncio
import getpass

from app.core.database import SessionLocal, close_engine
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.service import IdentityService

MIN_PASSWORD_LENGTH = 8


async def _run(*, email: str, password: str, full_name: str | None) -> tuple[str, bool]:
    async with SessionLocal() as session:
        try:
            repository = IdentityRepository(session)
            existed = await repository.get_admin_by_email(email) is not None
            admin = await IdentityService(repository).create_admin(email, password, full_name)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    return admin.email, not existed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Create an admin account, or reset its password and re-activate it.",
    )
    parser.add_argument("email", help="Admin e-mail used to sign in.")
    parser.add_argument("--full-name", default=None, help="Display name for the admin.")
    parser.add_argument(
        "--password",
        default=None,
        help="Password to set. Prompted for when omitted.",
    )
    return parser


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        return 1

    try:
        email, created = asyncio.run(_run(email=args.email, password=password, full_name=args.full_name))
    except Exception as exc:
        print(f"Admin setup failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    print(f"Admin {'created' if created else 'updated'}: {email}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
