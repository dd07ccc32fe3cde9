"""
Seed the default pipeline stages.

Usage:
    python scripts/seed.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import Database, get_async_session_context
from app.services.stage_service import StageService

logger = logging.getLogger("seed")


async def seed_stages() -> int:
    database = Database(settings.DATABASE_URL)
    try:
        async with get_async_session_context(database) as db:
            result = await StageService(db).seed_default_stages()
    finally:
        await database.dispose()

    if not result.success:
        logger.error("Seeding failed: %s", result.error.message)
        return 1

    for stage in result.data:
        logger.info("Stage %d: %s (%s)", stage.order, stage.name, stage.id)
    return 0


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(seed_stages()))
