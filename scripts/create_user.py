"""
Create a staff account for the dashboard.

Usage:
    python scripts/create_user.py admin@example.com "Admin User"
    (the password is prompted for)
"""

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import Database, get_async_session_context
from app.schemas.user import UserCreate
from app.services.auth_service import AuthService

logger = logging.getLogger("create_user")


async def create_user(data: UserCreate) -> int:
    database = Database(settings.DATABASE_URL)
    try:
        async with get_async_session_context(database) as db:
            result = await AuthService(db).create_user(data)
    finally:
        await database.dispose()

    if not result.success:
        logger.error("Could not create %s: %s", data.email, result.error.message)
        return 1

    logger.info("Created user %s (ID: %s)", result.data.email, result.data.id)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email")
    parser.add_argument("full_name")
    args = parser.parse_args()

    password = getpass.getpass("Password (min 8 chars): ")
    try:
        data = UserCreate(email=args.email, full_name=args.full_name, password=password)
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)
        return 2

    return asyncio.run(create_user(data))


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    sys.exit(main())
