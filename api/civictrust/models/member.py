import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .petition import Comment, Petition, Vote


class Member(Base):
    __tablename__ = "members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)

    # Anonymity is decided by the profile layer; the leaderboard only reads it
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    anonymous_display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Cached derived value, written only by services.reputation
    reputation_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    reputation_computed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    petitions: Mapped[list["Petition"]] = relationship("Petition", back_populates="creator")
    comments: Mapped[list["Comment"]] = relationship("Comment", back_populates="member")
    votes: Mapped[list["Vote"]] = relationship("Vote", back_populates="member")
