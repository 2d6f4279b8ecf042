"""Reputation leaderboard.

Read-only: members ordered by their stored reputation_score, highest first.
Members with equal scores keep registration order. Positions 1-3 get a
medal badge; every other position is shown as its plain number.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.config import settings
from civictrust.models.member import Member
from civictrust.services.anonymity import get_display_name
from civictrust.services.errors import DataUnavailableError
from civictrust.services.trust_view import TrustView, derive_trust_view

RANK_BADGES = {1: "🥇", 2: "🥈", 3: "🥉"}


@dataclass(frozen=True)
class LeaderboardEntry:
    member: Member
    rank: int
    reputation_score: int
    display_name: str
    rank_badge: Optional[str]
    trust_view: TrustView


def rank_badge(rank: int) -> Optional[str]:
    return RANK_BADGES.get(rank)


async def get_leaderboard(db: AsyncSession, limit: Optional[int] = None) -> list[LeaderboardEntry]:
    """Return the top ``limit`` members by reputation.

    Raises:
        DataUnavailableError: the store could not be read.
    """
    if limit is None:
        limit = settings.leaderboard_default_limit

    try:
        result = await db.execute(
            select(Member)
            .order_by(Member.reputation_score.desc(), Member.created_at, Member.id)
            .limit(limit)
        )
        members = list(result.scalars().all())
    except SQLAlchemyError as exc:
        raise DataUnavailableError(f"leaderboard: {exc}") from exc

    return [
        LeaderboardEntry(
            member=member,
            rank=position,
            reputation_score=member.reputation_score,
            display_name=get_display_name(member),
            rank_badge=rank_badge(position),
            trust_view=derive_trust_view(member.reputation_score),
        )
        for position, member in enumerate(members, start=1)
    ]
