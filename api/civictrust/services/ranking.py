"""Organization rankings by persisted trust score.

Competition ranking: rank = 1 + number of peers with a strictly greater
trust_score. Tied organizations share a rank and the next rank skips, so
scores [90, 90, 70] rank [1, 1, 3].

Three scopes are ranked: national (all organizations), regional (same
region) and category (same category). Regional and category ranks are None
when the organization has no region or category.

Ranks are computed from the trust scores stored at call time and written
back with ranks_computed_at. They are not refreshed when a trust score
changes; callers request a recompute explicitly (e.g. on dashboard load).
"""

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.metrics import observe_recompute
from civictrust.models.organization import Organization
from civictrust.services.errors import DataUnavailableError, NotFoundError, ScoreWriteError

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Rankings:
    national: int
    regional: Optional[int]
    category: Optional[int]

    def as_dict(self) -> dict:
        return asdict(self)


def competition_rank(score: float, peer_scores: Iterable[float]) -> int:
    """Rank of ``score`` among ``peer_scores`` (which may include itself)."""
    return 1 + sum(1 for peer in peer_scores if peer > score)


async def _count_higher(db: AsyncSession, trust_score: float, *criteria) -> int:
    result = await db.execute(
        select(func.count(Organization.id))
        .where(Organization.trust_score > trust_score)
        .where(*criteria)
    )
    return result.scalar_one() or 0


async def compute_rankings(db: AsyncSession, org_id: uuid.UUID) -> Rankings:
    """Compute and persist national, regional and category ranks.

    Raises:
        NotFoundError: the organization does not exist; no rank is written.
        DataUnavailableError: the store could not be read; no rank is written.
        ScoreWriteError: ranks were computed but not saved.
    """
    with observe_recompute("rankings"):
        try:
            result = await db.execute(
                select(
                    Organization.trust_score,
                    Organization.region,
                    Organization.category,
                ).where(Organization.id == org_id)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("organization", org_id)

            trust_score, region, category = row

            national = await _count_higher(db, trust_score) + 1

            regional = None
            if region:
                regional = await _count_higher(db, trust_score, Organization.region == region) + 1

            category_rank = None
            if category:
                category_rank = (
                    await _count_higher(db, trust_score, Organization.category == category) + 1
                )
        except SQLAlchemyError as exc:
            raise DataUnavailableError(f"rankings for {org_id}: {exc}") from exc

        rankings = Rankings(national=national, regional=regional, category=category_rank)

        try:
            await db.execute(
                update(Organization)
                .where(Organization.id == org_id)
                .values(
                    national_rank=rankings.national,
                    regional_rank=rankings.regional,
                    category_rank=rankings.category,
                    ranks_computed_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            log.error("rankings_write_failed", organization_id=str(org_id), error=str(exc))
            raise ScoreWriteError("rankings", org_id, rankings) from exc

    log.info("rankings_recomputed", organization_id=str(org_id), **rankings.as_dict())
    return rankings
