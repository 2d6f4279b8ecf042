"""Recompute every member's reputation score.

Admin tool for backfills after a scoring change or a bulk import. It is run
by hand; reputation is otherwise only recomputed after qualifying actions.

Key behaviors:
- Members are rescored one at a time, each in its own commit
- A member that fails is logged and counted; the run continues
- Exits non-zero when any member failed

Usage:
    cd api
    DATABASE_URL="postgresql+asyncpg://..." python -m scripts.recompute_reputations
"""
import argparse
import asyncio
import sys

import redis.asyncio as aioredis
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from civictrust.config import settings
from civictrust.logging_config import configure_logging
from civictrust.services.reputation import recompute_all_reputations

log = structlog.get_logger()


async def recompute(use_lock: bool) -> dict:
    # Standalone engine so the script runs without the app
    engine = create_async_engine(settings.database_url, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    redis_client = None
    if use_lock and settings.redis_url:
        redis_client = aioredis.from_url(settings.redis_url)

    try:
        async with session_factory() as session:
            return await recompute_all_reputations(session, redis_client=redis_client)
    finally:
        if redis_client is not None:
            await redis_client.aclose()
        await engine.dispose()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recompute reputation scores for all CivicTrust members"
    )
    parser.add_argument(
        "--no-lock",
        action="store_true",
        help="Skip per-member Redis locking even if RECOMPUTE_LOCK_ENABLED is set",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    configure_logging(settings.log_level)
    summary = asyncio.run(recompute(use_lock=not args.no_lock))
    print(f"Reputation recompute complete: {summary['updated']} updated, {summary['failed']} failed")
    if summary["failed"]:
        sys.exit(1)
