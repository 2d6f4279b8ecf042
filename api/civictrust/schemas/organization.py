"""Pydantic schemas for organization trust, governance, rankings and ratings."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_RATING = 1
MAX_RATING = 5


class TrustScoreResponse(BaseModel):
    organization_id: uuid.UUID
    trust_score: float
    label: str
    color: str
    icon: str
    persisted: bool = True


class GovernanceMetricsResponse(BaseModel):
    organization_id: uuid.UUID
    transparency: int
    accountability: int
    participation: int
    trust: int


class RankingsResponse(BaseModel):
    """Ranks as of computed_at; they go stale as trust scores change."""

    organization_id: uuid.UUID
    national: int
    regional: Optional[int] = None
    category: Optional[int] = None
    computed_at: Optional[datetime] = None
    persisted: bool = True


class RatingCreate(BaseModel):
    """Request schema for rating an organization in one category."""

    rater_id: uuid.UUID
    category: str = Field(min_length=1, max_length=50)
    score: int = Field(ge=MIN_RATING, le=MAX_RATING)
    review_text: Optional[str] = None
    is_anonymous: bool = False

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        return value.strip().lower()


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    rater_id: uuid.UUID
    organization_id: uuid.UUID
    category: str
    score: int
    review_text: Optional[str] = None
    is_anonymous: bool
    created: bool
    trust_score: Optional[float] = None


class InteractionCreate(BaseModel):
    user_id: uuid.UUID
    interaction_type: str = Field(min_length=1, max_length=30)
    content_id: Optional[uuid.UUID] = None
    metadata: Optional[dict] = None


class InteractionResponse(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID
    interaction_type: str
    created_at: datetime
    trust_score: Optional[float] = None
