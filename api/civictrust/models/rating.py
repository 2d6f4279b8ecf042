"""Rating ORM model.

One row per (rater, organization, category). A second submission for the
same triple overwrites the first; upsert code should reference
RATING_UNIQUE_CONSTRAINT instead of hardcoding the constraint name.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .organization import Organization

RATING_UNIQUE_CONSTRAINT = "uq_organization_ratings_rater_organization_category"
RATING_CONFLICT_COLUMNS = ("rater_id", "organization_id", "category")


class Rating(Base):
    __tablename__ = "organization_ratings"

    __table_args__ = (
        UniqueConstraint(*RATING_CONFLICT_COLUMNS, name=RATING_UNIQUE_CONSTRAINT),
        Index("ix_organization_ratings_organization_id", "organization_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    rater_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id"), nullable=False
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    review_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="ratings", lazy="raise"
    )
