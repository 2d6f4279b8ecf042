"""Writes owned by other workflows that the scoring engine relies on.

Neither function recomputes anything. Callers fire the matching
services.hooks event afterwards so the scorers can run (or be tested)
independently of the mutation.
"""

import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.models.interaction import Interaction
from civictrust.models.rating import RATING_CONFLICT_COLUMNS, Rating

# Dialects with INSERT ... ON CONFLICT DO UPDATE support
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_insert(db: AsyncSession):
    dialect_name = db.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect_name]
    except KeyError:
        raise ValueError(f"rating upsert is not supported on {dialect_name}") from None


async def upsert_rating(
    db: AsyncSession,
    rater_id: uuid.UUID,
    org_id: uuid.UUID,
    category: str,
    score: int,
    review_text: Optional[str] = None,
    is_anonymous: bool = False,
) -> tuple[Rating, bool]:
    """Insert or overwrite the rater's rating for (organization, category).

    Returns:
        (rating, created) where created is False when an earlier rating
        for the same triple was overwritten.
    """
    existing = await db.execute(
        select(Rating.id)
        .where(Rating.rater_id == rater_id)
        .where(Rating.organization_id == org_id)
        .where(Rating.category == category)
    )
    created = existing.scalar_one_or_none() is None

    insert = _upsert_insert(db)
    stmt = insert(Rating).values(
        rater_id=rater_id,
        organization_id=org_id,
        category=category,
        score=score,
        review_text=review_text,
        is_anonymous=is_anonymous,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=list(RATING_CONFLICT_COLUMNS),
        set_={
            "score": stmt.excluded.score,
            "review_text": stmt.excluded.review_text,
            "is_anonymous": stmt.excluded.is_anonymous,
            "updated_at": func.now(),
        },
    )
    await db.execute(stmt)
    await db.commit()

    result = await db.execute(
        select(Rating)
        .where(Rating.rater_id == rater_id)
        .where(Rating.organization_id == org_id)
        .where(Rating.category == category)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one(), created


async def record_interaction(
    db: AsyncSession,
    org_id: uuid.UUID,
    user_id: uuid.UUID,
    interaction_type: str,
    content_id: Optional[uuid.UUID] = None,
    metadata: Optional[dict] = None,
) -> Interaction:
    """Append one interaction row. Interactions are never updated or deleted."""
    interaction = Interaction(
        organization_id=org_id,
        user_id=user_id,
        interaction_type=interaction_type,
        content_id=content_id,
        metadata_json=metadata,
    )
    db.add(interaction)
    await db.commit()
    await db.refresh(interaction)
    return interaction
