"""Standalone runner that rebuilds cached aggregates from the rating tables.

Use after a restore or whenever idea averages / user stats look off.

Usage: python -m batshit.workers.reconcile_runner
"""

from __future__ import annotations

import asyncio
import logging

from batshit.config import get_settings
from batshit.database import close_db, get_session_factory, init_db
from batshit.stats.reconcile import rebuild_idea_aggregates, rebuild_user_stats

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def reconcile() -> dict[str, int]:
    """Run both rebuilds in one transaction and commit."""
    async with get_session_factory()() as db:
        ideas_fixed = await rebuild_idea_aggregates(db)
        stats_fixed = await rebuild_user_stats(db)
        await db.commit()
    return {"ideas": ideas_fixed, "user_stats": stats_fixed}


async def main() -> None:
    settings = get_settings()
    await init_db(settings.database_url)
    try:
        result = await reconcile()
        logger.info("Reconcile finished: %s", result)
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
