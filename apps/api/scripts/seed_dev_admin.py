"""
Seed Development Admin User

Creates the users row behind the development bearer tokens ("dev-token",
"test-token", "bearer"), so careers created locally pass the principal
check. Safe to run more than once.

Usage:
    cd apps/api
    python scripts/seed_dev_admin.py
"""

import asyncio
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from schoolcms.core.auth import DEV_ADMIN
from schoolcms.core.config import settings
from schoolcms.core.database import async_session_maker, close_db
from schoolcms.modules.users.models import User, UserRole


async def seed_dev_admin() -> None:
    """Create the development admin user if it doesn't exist."""
    if not settings.is_development:
        print(f"Refusing to seed the development admin in {settings.python_env} mode")
        return

    async with async_session_maker() as db:
        existing_user = await db.get(User, DEV_ADMIN.id)

        if existing_user:
            print(f"Development admin already exists: {existing_user.email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            return

        admin_user = User(
            id=DEV_ADMIN.id,
            email=DEV_ADMIN.email,
            first_name="Development",
            last_name="Admin",
            role=UserRole(DEV_ADMIN.role),
            is_active=True,
        )

        db.add(admin_user)
        await db.commit()

        print("Development admin created successfully!")
        print(f"  Email: {admin_user.email}")
        print(f"  ID: {admin_user.id}")
        print(f"  Role: {admin_user.role.value}")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_dev_admin())
