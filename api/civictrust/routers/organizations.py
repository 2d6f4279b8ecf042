"""Organization trust, governance, ranking and rating endpoints.

POST /api/v1/organizations/{org_id}/trust-score  -- recompute and persist trust score
GET  /api/v1/organizations/{org_id}/governance   -- governance metrics (read-only)
POST /api/v1/organizations/{org_id}/rankings     -- recompute and persist ranks
PUT  /api/v1/organizations/{org_id}/ratings      -- upsert a rating, then rescore
POST /api/v1/organizations/{org_id}/interactions -- record an interaction, then rescore
"""

import uuid

import structlog
from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from civictrust.dependencies import DbSession, RedisClient, scoring_http_error
from civictrust.models.member import Member
from civictrust.models.organization import Organization
from civictrust.schemas.organization import (
    GovernanceMetricsResponse,
    InteractionCreate,
    InteractionResponse,
    RankingsResponse,
    RatingCreate,
    RatingResponse,
    TrustScoreResponse,
)
from civictrust.services.errors import ScoreWriteError, ScoringError
from civictrust.services.governance import compute_governance_metrics
from civictrust.services.hooks import ActivityEvent, dispatch
from civictrust.services.mutations import record_interaction, upsert_rating
from civictrust.services.ranking import compute_rankings
from civictrust.services.trust import compute_organization_trust_score
from civictrust.services.trust_view import organization_trust_label

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["organizations"])


async def _require_organization(db, org_id: uuid.UUID) -> None:
    result = await db.execute(select(Organization.id).where(Organization.id == org_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Organization not found")


async def _require_member(db, member_id: uuid.UUID) -> None:
    result = await db.execute(select(Member.id).where(Member.id == member_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Member not found")


async def _rescore_after(db, redis_client, event: ActivityEvent, org_id: uuid.UUID):
    """Fire the post-mutation hook; the mutation itself is already committed.

    Returns the new trust score, or None when rescoring failed. The failure
    is logged by the hook dispatcher and the stored score is left as it was.
    """
    try:
        results = await dispatch(db, event, redis_client=redis_client, organization_id=org_id)
    except ScoreWriteError as exc:
        return exc.value
    except ScoringError as exc:
        log.warning("trust_score_rescore_skipped", organization_id=str(org_id), error=str(exc))
        return None
    return results[-1] if results else None


@router.post("/organizations/{org_id}/trust-score", response_model=TrustScoreResponse)
async def recompute_trust_score(
    org_id: uuid.UUID,
    db: DbSession,
    redis_client: RedisClient,
) -> TrustScoreResponse:
    """Recompute an organization's trust score from all ratings, interactions and responses."""
    persisted = True
    try:
        trust_score = await compute_organization_trust_score(
            db, org_id, redis_client=redis_client
        )
    except ScoreWriteError as exc:
        trust_score = exc.value
        persisted = False
    except ScoringError as exc:
        raise scoring_http_error(exc)

    return TrustScoreResponse(
        organization_id=org_id,
        trust_score=trust_score,
        persisted=persisted,
        **organization_trust_label(trust_score),
    )


@router.get("/organizations/{org_id}/governance", response_model=GovernanceMetricsResponse)
async def get_governance_metrics(
    org_id: uuid.UUID,
    db: DbSession,
) -> GovernanceMetricsResponse:
    try:
        metrics = await compute_governance_metrics(db, org_id)
    except ScoringError as exc:
        raise scoring_http_error(exc)

    return GovernanceMetricsResponse(organization_id=org_id, **metrics.as_dict())


@router.post("/organizations/{org_id}/rankings", response_model=RankingsResponse)
async def recompute_rankings(
    org_id: uuid.UUID,
    db: DbSession,
) -> RankingsResponse:
    """Rank the organization against its peers using their stored trust scores."""
    persisted = True
    try:
        rankings = await compute_rankings(db, org_id)
    except ScoreWriteError as exc:
        rankings = exc.value
        persisted = False
    except ScoringError as exc:
        raise scoring_http_error(exc)

    computed_at = None
    if persisted:
        result = await db.execute(
            select(Organization.ranks_computed_at).where(Organization.id == org_id)
        )
        computed_at = result.scalar_one_or_none()

    return RankingsResponse(
        organization_id=org_id,
        computed_at=computed_at,
        persisted=persisted,
        **rankings.as_dict(),
    )


@router.put("/organizations/{org_id}/ratings", response_model=RatingResponse)
async def submit_rating(
    org_id: uuid.UUID,
    body: RatingCreate,
    db: DbSession,
    redis_client: RedisClient,
) -> RatingResponse:
    """Rate an organization in one category.

    A rater has at most one rating per organization and category; a second
    submission overwrites the first (created=false). The organization's
    trust score is recomputed afterwards.
    """
    await _require_organization(db, org_id)
    await _require_member(db, body.rater_id)

    rating, created = await upsert_rating(
        db,
        rater_id=body.rater_id,
        org_id=org_id,
        category=body.category,
        score=body.score,
        review_text=body.review_text,
        is_anonymous=body.is_anonymous,
    )

    trust_score = await _rescore_after(db, redis_client, ActivityEvent.rating_submitted, org_id)

    return RatingResponse(
        id=rating.id,
        rater_id=rating.rater_id,
        organization_id=rating.organization_id,
        category=rating.category,
        score=rating.score,
        review_text=rating.review_text,
        is_anonymous=rating.is_anonymous,
        created=created,
        trust_score=trust_score,
    )


@router.post(
    "/organizations/{org_id}/interactions",
    response_model=InteractionResponse,
    status_code=201,
)
async def submit_interaction(
    org_id: uuid.UUID,
    body: InteractionCreate,
    db: DbSession,
    redis_client: RedisClient,
) -> InteractionResponse:
    await _require_organization(db, org_id)
    await _require_member(db, body.user_id)

    interaction = await record_interaction(
        db,
        org_id=org_id,
        user_id=body.user_id,
        interaction_type=body.interaction_type,
        content_id=body.content_id,
        metadata=body.metadata,
    )

    trust_score = await _rescore_after(
        db, redis_client, ActivityEvent.interaction_recorded, org_id
    )

    return InteractionResponse(
        id=interaction.id,
        organization_id=interaction.organization_id,
        user_id=interaction.user_id,
        interaction_type=interaction.interaction_type,
        created_at=interaction.created_at,
        trust_score=trust_score,
    )
