from .base import Base
from .member import Member
from .petition import Comment, Petition, Vote, VoteType
from .organization import (
    Organization,
    OrganizationFollower,
    OrganizationPost,
    PostVisibility,
    Project,
    ProjectStatus,
)
from .rating import RATING_UNIQUE_CONSTRAINT, Rating
from .interaction import Interaction, PetitionResponse

__all__ = [
    "Base",
    "Member",
    "Petition",
    "Comment",
    "Vote",
    "VoteType",
    "Organization",
    "OrganizationFollower",
    "OrganizationPost",
    "PostVisibility",
    "Project",
    "ProjectStatus",
    "Rating",
    "RATING_UNIQUE_CONSTRAINT",
    "Interaction",
    "PetitionResponse",
]
