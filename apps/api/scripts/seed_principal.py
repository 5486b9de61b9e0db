"""
Seed Principal Account

Creates the PRINCIPAL account for an already registered school. School
registration only creates the clerk account, so run this once per school.

Usage:
    cd apps/api
    python scripts/seed_principal.py --school-id 1 --username principal \
        --email principal@school.example
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.core.security import hash_password
from app.modules.auth.service import MIN_PASSWORD_LENGTH
from app.modules.schools.repository import SchoolRepository
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository


async def seed_principal(school_id: int, username: str, email: str, password: str) -> int:
    """Create the principal account if the username and email are free."""
    engine = create_async_engine(settings.database_url, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with async_session() as db:
            school = await SchoolRepository.get_by_id(db, school_id)
            if not school:
                print(f"School {school_id} not found")
                return 1

            if await UserRepository.username_or_email_exists(db, username, email):
                print(f"Username or email already in use: {username} / {email}")
                return 1

            principal = await UserRepository.create(
                db,
                school_id=school.id,
                school_name=school.name,
                username=username,
                school_email=email,
                password_hash=hash_password(password),
                role=UserRole.PRINCIPAL,
            )
            await db.commit()

            print("Principal account created successfully!")
            print(f"  School: {school.name} (ID {school.id})")
            print(f"  Username: {principal.username}")
            print(f"  ID: {principal.id}")
            return 0
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a school's principal account")
    parser.add_argument("--school-id", type=int, required=True)
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    args = parser.parse_args()

    password = getpass.getpass("Principal password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    return asyncio.run(seed_principal(args.school_id, args.username, args.email, password))


if __name__ == "__main__":
    sys.exit(main())
