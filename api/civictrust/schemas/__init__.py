"""CivicTrust Pydantic schemas package.

Re-exports all request and response schemas for convenient importing:

    from civictrust.schemas import RatingCreate, ReputationResponse, ...
"""

from civictrust.schemas.organization import (
    GovernanceMetricsResponse,
    InteractionCreate,
    InteractionResponse,
    RankingsResponse,
    RatingCreate,
    RatingResponse,
    TrustScoreResponse,
)
from civictrust.schemas.reputation import (
    LeaderboardEntryResponse,
    LeaderboardResponse,
    ReputationLevelItem,
    ReputationResponse,
    TrustViewResponse,
)

__all__ = [
    # Reputation
    "ReputationResponse",
    "TrustViewResponse",
    "ReputationLevelItem",
    "LeaderboardEntryResponse",
    "LeaderboardResponse",
    # Organization
    "TrustScoreResponse",
    "GovernanceMetricsResponse",
    "RankingsResponse",
    "RatingCreate",
    "RatingResponse",
    "InteractionCreate",
    "InteractionResponse",
]
