import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .interaction import Interaction, PetitionResponse
    from .rating import Rating


class PostVisibility(str, enum.Enum):
    public = "public"
    followers = "followers"
    private = "private"


class ProjectStatus(str, enum.Enum):
    planned = "planned"
    active = "active"
    completed = "completed"


class Organization(Base):
    """An organization ("body") that members rate, follow and petition.

    trust_score and the three rank columns are cached derived values. Each
    carries a *_computed_at marker so readers can tell how stale it is; the
    ranks in particular are only refreshed on explicit request.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    region: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    trust_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, index=True)
    trust_score_computed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    national_rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    regional_rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    category_rank: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ranks_computed_at: Mapped[Optional[datetime]] = mapped_column(
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
    ratings: Mapped[list["Rating"]] = relationship("Rating", back_populates="organization")
    interactions: Mapped[list["Interaction"]] = relationship(
        "Interaction", back_populates="organization"
    )
    petition_responses: Mapped[list["PetitionResponse"]] = relationship(
        "PetitionResponse", back_populates="organization"
    )


class OrganizationFollower(Base):
    __tablename__ = "organization_followers"

    # Composite PK (organization_id, member_id)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id"), primary_key=True
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class OrganizationPost(Base):
    __tablename__ = "organization_posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id"), nullable=False, index=True
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    visibility: Mapped[str] = mapped_column(
        String(20), default=PostVisibility.public, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=ProjectStatus.planned, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
