"""Create the dashboard admin account. Run once after migrating.

    visitor-dashboard-create-admin --username admin --password 's3cret'
"""

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from visitor_dashboard.core.config import settings
from visitor_dashboard.core.security import hash_password
from visitor_dashboard.models.admin import AdminUser


async def create_admin(
    session_factory: async_sessionmaker[AsyncSession],
    username: str,
    password: str,
) -> bool:
    """Create ``username`` unless it already exists. Returns True if created."""
    async with session_factory() as db:
        result = await db.execute(select(AdminUser).where(AdminUser.username == username))
        if result.scalar_one_or_none() is not None:
            return False

        db.add(AdminUser(username=username, hashed_password=hash_password(password)))
        await db.commit()
        return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the visitor dashboard admin user")
    parser.add_argument("--username", default=settings.DEFAULT_ADMIN_USERNAME)
    parser.add_argument("--password", default=settings.DEFAULT_ADMIN_PASSWORD)
    args = parser.parse_args(argv)

    from visitor_dashboard.core.database import async_session

    created = asyncio.run(create_admin(async_session, args.username, args.password))
    if created:
        print(f"Admin user created: username={args.username}")
    else:
        print(f"Admin user '{args.username}' already exists.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
