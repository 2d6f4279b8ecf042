"""Shared fixtures: a fresh in-memory SQLite database per test.

Services commit their own writes, so each test gets its own engine rather
than a rolled-back transaction.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from civictrust.database import get_db
from civictrust.main import app
from civictrust.models import (
    Base,
    Comment,
    Interaction,
    Member,
    Organization,
    OrganizationFollower,
    OrganizationPost,
    Petition,
    PetitionResponse,
    Project,
    Rating,
    Vote,
)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Factory:
    """Inserts rows with sensible defaults and commits each one."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.commit()
        return obj

    async def member(self, **kwargs) -> Member:
        kwargs.setdefault("full_name", "Test Member")
        return await self._save(Member(**kwargs))

    async def organization(self, **kwargs) -> Organization:
        kwargs.setdefault("name", "Test Organization")
        return await self._save(Organization(**kwargs))

    async def petition(
        self, creator: Member, votes_for: int = 0, votes_against: int = 0, **kwargs
    ) -> Petition:
        kwargs.setdefault("title", "Test petition")
        return await self._save(
            Petition(
                creator_id=creator.id,
                votes_for=votes_for,
                votes_against=votes_against,
                **kwargs,
            )
        )

    async def comment(self, member: Member, petition: Petition) -> Comment:
        return await self._save(
            Comment(member_id=member.id, petition_id=petition.id, body="A comment")
        )

    async def vote(self, member: Member, petition: Petition, vote_type: str = "for") -> Vote:
        return await self._save(
            Vote(member_id=member.id, petition_id=petition.id, vote_type=vote_type)
        )

    async def rating(
        self, rater: Member, org: Organization, score: int, category: str = "overall"
    ) -> Rating:
        return await self._save(
            Rating(rater_id=rater.id, organization_id=org.id, category=category, score=score)
        )

    async def interaction(
        self,
        org: Organization,
        user: Member,
        interaction_type: str = "like",
        created_at: Optional[datetime] = None,
    ) -> Interaction:
        kwargs = {}
        if created_at is not None:
            kwargs["created_at"] = created_at
        return await self._save(
            Interaction(
                organization_id=org.id,
                user_id=user.id,
                interaction_type=interaction_type,
                **kwargs,
            )
        )

    async def response(
        self, org: Organization, petition: Petition, response_text: Optional[str] = None
    ) -> PetitionResponse:
        return await self._save(
            PetitionResponse(
                organization_id=org.id,
                petition_id=petition.id,
                response_text=response_text,
            )
        )

    async def follower(self, org: Organization, member: Member) -> OrganizationFollower:
        return await self._save(
            OrganizationFollower(organization_id=org.id, member_id=member.id)
        )

    async def post(self, org: Organization, visibility: str = "public") -> OrganizationPost:
        return await self._save(
            OrganizationPost(organization_id=org.id, body="Update", visibility=visibility)
        )

    async def project(self, org: Organization, status: str = "planned") -> Project:
        return await self._save(
            Project(organization_id=org.id, title="Project", status=status)
        )


@pytest.fixture
def make(db) -> Factory:
    return Factory(db)


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def missing_id() -> uuid.UUID:
    return uuid.uuid4()
