"""Organization trust score.

The trust score is a composite in [0, 100] built from three independently
weighted components:

- ratings (RATING_WEIGHT): average rating / 5
- interactions (INTERACTION_WEIGHT): positive interactions / all interactions
- responses (RESPONSE_WEIGHT): answered petition responses / all response records

A component with no underlying rows contributes 0. The sum is rounded to
one decimal (half away from zero for positive values) and then clamped,
so malformed upstream data such as out-of-range ratings cannot push the
score outside its range.

Design notes:
- The score is a full aggregation over all historical rows on every call.
- The write is a plain UPDATE of trust_score after the reads, with no
  transaction spanning read and write. Two back-to-back ratings can each
  recompute from the same snapshot and the second UPDATE overwrites the
  first (last writer wins). services.locking serializes this per
  organization when enabled.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import Optional

import redis.asyncio as aioredis
import structlog
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.metrics import observe_recompute
from civictrust.models.organization import Organization
from civictrust.services.activity import OrganizationActivity, fetch_organization_activity
from civictrust.services.errors import ScoreWriteError
from civictrust.services.locking import recompute_guard

log = structlog.get_logger(__name__)

TRUST_SCORE_MIN = 0.0
TRUST_SCORE_MAX = 100.0

RATING_WEIGHT = 40
INTERACTION_WEIGHT = 30
RESPONSE_WEIGHT = 30

MAX_RATING = 5.0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like Math.round: halves go toward +infinity."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def score_organization_activity(activity: OrganizationActivity) -> float:
    """Turn an organization's activity snapshot into a clamped trust score."""
    rating_component = 0.0
    if activity.rating_scores:
        average = sum(activity.rating_scores) / len(activity.rating_scores)
        rating_component = (average / MAX_RATING) * RATING_WEIGHT

    interaction_component = 0.0
    if activity.interaction_count > 0:
        positive_ratio = activity.positive_interaction_count / activity.interaction_count
        interaction_component = positive_ratio * INTERACTION_WEIGHT

    response_component = 0.0
    if activity.response_count > 0:
        response_rate = activity.answered_response_count / activity.response_count
        response_component = response_rate * RESPONSE_WEIGHT

    total = round_half_up(rating_component + interaction_component + response_component, 1)
    return max(TRUST_SCORE_MIN, min(total, TRUST_SCORE_MAX))


async def compute_organization_trust_score(
    db: AsyncSession,
    org_id: uuid.UUID,
    redis_client: Optional[aioredis.Redis] = None,
) -> float:
    """Recompute an organization's trust score and persist it.

    Args:
        db: Async SQLAlchemy session. Committed here on success.
        org_id: Organization to rescore.
        redis_client: Used for per-organization serialization when enabled.

    Returns:
        The new trust score, rounded to one decimal.

    Raises:
        NotFoundError, DataUnavailableError: nothing was written.
        ScoreWriteError: the score was computed but not saved.
    """
    with observe_recompute("trust_score"):
        async with recompute_guard(redis_client, "organization", org_id):
            activity = await fetch_organization_activity(db, org_id)
            trust_score = score_organization_activity(activity)

            try:
                await db.execute(
                    update(Organization)
                    .where(Organization.id == org_id)
                    .values(
                        trust_score=trust_score,
                        trust_score_computed_at=datetime.now(timezone.utc),
                    )
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                log.error(
                    "trust_score_write_failed",
                    organization_id=str(org_id),
                    trust_score=trust_score,
                    error=str(exc),
                )
                raise ScoreWriteError("trust_score", org_id, trust_score) from exc

    log.info("trust_score_recomputed", organization_id=str(org_id), trust_score=trust_score)
    return trust_score
