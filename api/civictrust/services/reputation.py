"""Member reputation scoring.

Reputation is a capped integer in [0, REPUTATION_MAX] that measures the
quality and volume of a member's civic activity. It is always recomputed
from scratch, never adjusted incrementally, so running the recompute twice
on unchanged data writes the same value.

Scoring:
- Each authored petition with at least one vote adds floor(support * 100),
  where support = votes_for / (votes_for + votes_against).
- Each comment adds COMMENT_POINTS, each vote cast adds VOTE_POINTS.
- Each authored petition adds PETITION_POINTS regardless of its votes.
- The total is clamped to [0, REPUTATION_MAX] as the last step.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import Optional

import redis.asyncio as aioredis
import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.metrics import observe_recompute
from civictrust.models.member import Member
from civictrust.services.activity import MemberActivity, fetch_member_activity
from civictrust.services.errors import ScoreWriteError, ScoringError
from civictrust.services.locking import recompute_guard

log = structlog.get_logger(__name__)

REPUTATION_MIN = 0
REPUTATION_MAX = 10000

COMMENT_POINTS = 3
VOTE_POINTS = 1
PETITION_POINTS = 10


def score_member_activity(activity: MemberActivity) -> int:
    """Turn a member's activity snapshot into a clamped reputation score."""
    total = 0

    for petition in activity.petitions:
        votes = petition.votes_for + petition.votes_against
        if votes == 0:
            continue
        support_ratio = petition.votes_for / votes
        total += math.floor(support_ratio * 100)

    total += COMMENT_POINTS * activity.comment_count
    total += VOTE_POINTS * activity.votes_cast
    total += PETITION_POINTS * len(activity.petitions)

    return max(REPUTATION_MIN, min(total, REPUTATION_MAX))


async def compute_member_reputation(db: AsyncSession, member_id: uuid.UUID) -> int:
    """Compute a member's reputation without persisting it.

    Raises:
        NotFoundError: the member does not exist.
        DataUnavailableError: activity could not be read.
    """
    activity = await fetch_member_activity(db, member_id)
    return score_member_activity(activity)


async def update_member_reputation(
    db: AsyncSession,
    member_id: uuid.UUID,
    redis_client: Optional[aioredis.Redis] = None,
) -> int:
    """Recompute a member's reputation and write it to members.reputation_score.

    The cached value is only touched after the full score is known; if the
    activity read fails nothing is written and the previous score stays.

    Args:
        db: Async SQLAlchemy session. Committed here on success.
        member_id: Member to rescore.
        redis_client: Used for per-member serialization when enabled.

    Returns:
        The new reputation score.

    Raises:
        NotFoundError, DataUnavailableError: nothing was written.
        ScoreWriteError: the score was computed but not saved; the computed
            value is on the exception.
    """
    with observe_recompute("reputation"):
        async with recompute_guard(redis_client, "member", member_id):
            score = await compute_member_reputation(db, member_id)

            try:
                await db.execute(
                    update(Member)
                    .where(Member.id == member_id)
                    .values(
                        reputation_score=score,
                        reputation_computed_at=datetime.now(timezone.utc),
                    )
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                log.error(
                    "reputation_write_failed",
                    member_id=str(member_id),
                    reputation_score=score,
                    error=str(exc),
                )
                raise ScoreWriteError("reputation", member_id, score) from exc

    log.info("reputation_recomputed", member_id=str(member_id), reputation_score=score)
    return score


async def recompute_all_reputations(
    db: AsyncSession,
    redis_client: Optional[aioredis.Redis] = None,
) -> dict:
    """Recompute every member's reputation, one member at a time.

    A failure for one member is logged and counted; it does not stop the
    rest of the batch.

    Returns:
        {"updated": int, "failed": int}
    """
    result = await db.execute(select(Member.id).order_by(Member.created_at))
    member_ids = list(result.scalars().all())

    updated = 0
    failed = 0
    for member_id in member_ids:
        try:
            await update_member_reputation(db, member_id, redis_client=redis_client)
        except ScoringError as exc:
            failed += 1
            log.warning("reputation_batch_member_failed", member_id=str(member_id), error=str(exc))
            continue
        updated += 1

    log.info("reputation_batch_completed", updated=updated, failed=failed)
    return {"updated": updated, "failed": failed}
