"""Member reputation endpoints.

POST /api/v1/members/{member_id}/reputation -- recompute and persist reputation
GET  /api/v1/members/{member_id}/reputation -- stored reputation and trust view
GET  /api/v1/trust-view/{reputation_score}  -- trust view for an arbitrary score
"""

import uuid

from fastapi import APIRouter, HTTPException, Path
from sqlalchemy import select

from civictrust.dependencies import DbSession, RedisClient, scoring_http_error
from civictrust.models.member import Member
from civictrust.schemas.reputation import ReputationResponse, TrustViewResponse
from civictrust.services.errors import ScoreWriteError, ScoringError
from civictrust.services.reputation import REPUTATION_MAX, update_member_reputation
from civictrust.services.trust_view import derive_trust_view

router = APIRouter(prefix="/api/v1", tags=["reputation"])


@router.post("/members/{member_id}/reputation", response_model=ReputationResponse)
async def recompute_member_reputation(
    member_id: uuid.UUID,
    db: DbSession,
    redis_client: RedisClient,
) -> ReputationResponse:
    """Recompute a member's reputation from their full activity history.

    Called by the petition, vote and comment handlers after a qualifying
    action. If the score cannot be saved, the computed value is still
    returned with persisted=false.
    """
    persisted = True
    try:
        score = await update_member_reputation(db, member_id, redis_client=redis_client)
    except ScoreWriteError as exc:
        score = exc.value
        persisted = False
    except ScoringError as exc:
        raise scoring_http_error(exc)

    computed_at = None
    if persisted:
        result = await db.execute(
            select(Member.reputation_computed_at).where(Member.id == member_id)
        )
        computed_at = result.scalar_one_or_none()

    return ReputationResponse(
        member_id=member_id,
        reputation_score=score,
        computed_at=computed_at,
        persisted=persisted,
        trust_view=TrustViewResponse.from_view(derive_trust_view(score)),
    )


@router.get("/members/{member_id}/reputation", response_model=ReputationResponse)
async def get_member_reputation(
    member_id: uuid.UUID,
    db: DbSession,
) -> ReputationResponse:
    """Return the stored reputation score; nothing is recomputed on read."""
    result = await db.execute(select(Member).where(Member.id == member_id))
    member = result.scalar_one_or_none()
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")

    return ReputationResponse(
        member_id=member.id,
        reputation_score=member.reputation_score,
        computed_at=member.reputation_computed_at,
        trust_view=TrustViewResponse.from_view(derive_trust_view(member.reputation_score)),
    )


@router.get("/trust-view/{reputation_score}", response_model=TrustViewResponse)
async def get_trust_view(
    reputation_score: int = Path(ge=0, le=REPUTATION_MAX),
) -> TrustViewResponse:
    return TrustViewResponse.from_view(derive_trust_view(reputation_score))
