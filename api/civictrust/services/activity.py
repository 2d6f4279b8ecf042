"""Raw activity reads for the scoring services.

Every scorer pulls its inputs through this module so that the scoring
arithmetic itself stays a pure function of plain dataclasses. The readers
return full snapshots; nothing here is cached across calls.

Design notes:
- Counts use SELECT count(*) rather than loading rows. An empty result is
  a legitimate zero, not a failure.
- Any SQLAlchemyError is re-raised as DataUnavailableError so callers can
  tell "store unreachable" apart from "subject does not exist".
- There is no transaction spanning these reads and the later write of the
  derived value. Two recomputations for the same entity can interleave and
  the last write wins (see services.locking for the opt-in serialization).
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.config import settings
from civictrust.models.interaction import Interaction, PetitionResponse
from civictrust.models.member import Member
from civictrust.models.organization import (
    Organization,
    OrganizationFollower,
    OrganizationPost,
    PostVisibility,
    Project,
    ProjectStatus,
)
from civictrust.models.petition import Comment, Petition, Vote
from civictrust.models.rating import Rating
from civictrust.services.errors import DataUnavailableError, NotFoundError


@dataclass(frozen=True)
class PetitionTally:
    votes_for: int
    votes_against: int


@dataclass(frozen=True)
class MemberActivity:
    petitions: list[PetitionTally] = field(default_factory=list)
    comment_count: int = 0
    votes_cast: int = 0


@dataclass(frozen=True)
class OrganizationActivity:
    rating_scores: list[int] = field(default_factory=list)
    interaction_count: int = 0
    positive_interaction_count: int = 0
    response_count: int = 0
    answered_response_count: int = 0


@dataclass(frozen=True)
class GovernanceInputs:
    public_content_count: int = 0
    total_content_count: int = 0
    completed_project_count: int = 0
    total_project_count: int = 0
    follower_count: int = 0
    active_user_count: int = 0
    rating_scores: list[int] = field(default_factory=list)


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar_one() or 0


async def _require(db: AsyncSession, model, entity_id: uuid.UUID, kind: str) -> None:
    result = await db.execute(select(model.id).where(model.id == entity_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError(kind, entity_id)


async def fetch_member_activity(db: AsyncSession, member_id: uuid.UUID) -> MemberActivity:
    """Read everything the reputation scorer needs for one member.

    Raises:
        NotFoundError: the member does not exist.
        DataUnavailableError: the store could not be read.
    """
    try:
        await _require(db, Member, member_id, "member")

        petition_rows = await db.execute(
            select(Petition.votes_for, Petition.votes_against).where(
                Petition.creator_id == member_id
            )
        )
        petitions = [
            PetitionTally(votes_for=row.votes_for, votes_against=row.votes_against)
            for row in petition_rows.all()
        ]
        comment_count = await _count(
            db, select(func.count(Comment.id)).where(Comment.member_id == member_id)
        )
        votes_cast = await _count(
            db, select(func.count(Vote.id)).where(Vote.member_id == member_id)
        )
    except SQLAlchemyError as exc:
        raise DataUnavailableError(f"member activity for {member_id}: {exc}") from exc

    return MemberActivity(
        petitions=petitions,
        comment_count=comment_count,
        votes_cast=votes_cast,
    )


async def fetch_organization_activity(
    db: AsyncSession,
    org_id: uuid.UUID,
    positive_types: list[str] | None = None,
) -> OrganizationActivity:
    """Read ratings, interactions and response records for one organization.

    Args:
        db: Async SQLAlchemy session.
        org_id: Organization being scored.
        positive_types: Interaction types counted as positive. Defaults to
            settings.positive_interaction_types.
    """
    if positive_types is None:
        positive_types = settings.positive_interaction_types

    try:
        await _require(db, Organization, org_id, "organization")

        rating_rows = await db.execute(
            select(Rating.score).where(Rating.organization_id == org_id)
        )
        rating_scores = list(rating_rows.scalars().all())

        interaction_count = await _count(
            db,
            select(func.count(Interaction.id)).where(Interaction.organization_id == org_id),
        )
        positive_interaction_count = await _count(
            db,
            select(func.count(Interaction.id))
            .where(Interaction.organization_id == org_id)
            .where(Interaction.interaction_type.in_(positive_types)),
        )

        response_count = await _count(
            db,
            select(func.count(PetitionResponse.id)).where(
                PetitionResponse.organization_id == org_id
            ),
        )
        answered_response_count = await _count(
            db,
            select(func.count(PetitionResponse.id))
            .where(PetitionResponse.organization_id == org_id)
            .where(PetitionResponse.response_text.is_not(None)),
        )
    except SQLAlchemyError as exc:
        raise DataUnavailableError(f"organization activity for {org_id}: {exc}") from exc

    return OrganizationActivity(
        rating_scores=rating_scores,
        interaction_count=interaction_count,
        positive_interaction_count=positive_interaction_count,
        response_count=response_count,
        answered_response_count=answered_response_count,
    )


async def fetch_governance_inputs(
    db: AsyncSession,
    org_id: uuid.UUID,
    now: datetime,
    window_days: int | None = None,
) -> GovernanceInputs:
    """Read content, project, follower and engagement counts for one organization.

    Active users are the distinct members with at least one interaction
    created within the trailing ``window_days`` before ``now``.
    """
    if window_days is None:
        window_days = settings.participation_window_days
    since = now - timedelta(days=window_days)

    try:
        await _require(db, Organization, org_id, "organization")

        total_content_count = await _count(
            db,
            select(func.count(OrganizationPost.id)).where(
                OrganizationPost.organization_id == org_id
            ),
        )
        public_content_count = await _count(
            db,
            select(func.count(OrganizationPost.id))
            .where(OrganizationPost.organization_id == org_id)
            .where(OrganizationPost.visibility == PostVisibility.public.value),
        )

        total_project_count = await _count(
            db,
            select(func.count(Project.id)).where(Project.organization_id == org_id),
        )
        completed_project_count = await _count(
            db,
            select(func.count(Project.id))
            .where(Project.organization_id == org_id)
            .where(Project.status == ProjectStatus.completed.value),
        )

        follower_count = await _count(
            db,
            select(func.count(OrganizationFollower.member_id)).where(
                OrganizationFollower.organization_id == org_id
            ),
        )
        active_user_count = await _count(
            db,
            select(func.count(distinct(Interaction.user_id)))
            .where(Interaction.organization_id == org_id)
            .where(Interaction.created_at >= since),
        )

        rating_rows = await db.execute(
            select(Rating.score).where(Rating.organization_id == org_id)
        )
        rating_scores = list(rating_rows.scalars().all())
    except SQLAlchemyError as exc:
        raise DataUnavailableError(f"governance inputs for {org_id}: {exc}") from exc

    return GovernanceInputs(
        public_content_count=public_content_count,
        total_content_count=total_content_count,
        completed_project_count=completed_project_count,
        total_project_count=total_project_count,
        follower_count=follower_count,
        active_user_count=active_user_count,
        rating_scores=rating_scores,
    )
