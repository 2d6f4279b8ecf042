"""Pydantic schemas for member reputation, trust views and the leaderboard."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from civictrust.services.trust_view import TrustView


class ReputationLevelItem(BaseModel):
    name: str
    color: str


class TrustViewResponse(BaseModel):
    rating: float
    rating_display: str
    level: ReputationLevelItem
    badge: str
    progress_percent: int

    @classmethod
    def from_view(cls, view: TrustView) -> "TrustViewResponse":
        return cls(
            rating=view.rating,
            rating_display=view.rating_display,
            level=ReputationLevelItem(name=view.level.name, color=view.level.color),
            badge=view.badge,
            progress_percent=view.progress_percent,
        )


class ReputationResponse(BaseModel):
    """Cached or freshly recomputed reputation for one member.

    persisted is False when the score was computed but could not be saved;
    the value is still correct for display but the stored score is unchanged.
    """

    member_id: uuid.UUID
    reputation_score: int
    computed_at: Optional[datetime] = None
    persisted: bool = True
    trust_view: TrustViewResponse


class LeaderboardEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: uuid.UUID
    rank: int
    rank_badge: Optional[str] = None
    display_name: str
    reputation_score: int
    trust_view: TrustViewResponse


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntryResponse]
    limit: int
