"""Reputation leaderboard endpoint.

GET /api/v1/leaderboard?limit=N -- top members by stored reputation
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from civictrust.config import settings
from civictrust.dependencies import DbSession, scoring_http_error
from civictrust.schemas.reputation import (
    LeaderboardEntryResponse,
    LeaderboardResponse,
    TrustViewResponse,
)
from civictrust.services.errors import ScoringError
from civictrust.services.leaderboard import get_leaderboard

router = APIRouter(prefix="/api/v1", tags=["leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def read_leaderboard(
    db: DbSession,
    limit: Optional[int] = Query(default=None, ge=1),
) -> LeaderboardResponse:
    """Top members ordered by reputation, highest first.

    limit defaults to settings.leaderboard_default_limit and may not exceed
    settings.leaderboard_max_limit.
    """
    if limit is None:
        limit = settings.leaderboard_default_limit
    if limit > settings.leaderboard_max_limit:
        raise HTTPException(
            status_code=422,
            detail=f"limit must be at most {settings.leaderboard_max_limit}",
        )

    try:
        entries = await get_leaderboard(db, limit)
    except ScoringError as exc:
        raise scoring_http_error(exc)

    return LeaderboardResponse(
        limit=limit,
        entries=[
            LeaderboardEntryResponse(
                member_id=entry.member.id,
                rank=entry.rank,
                rank_badge=entry.rank_badge,
                display_name=entry.display_name,
                reputation_score=entry.reputation_score,
                trust_view=TrustViewResponse.from_view(entry.trust_view),
            )
            for entry in entries
        ],
    )
