"""Tests for the rating upsert and interaction append in civictrust.services.mutations."""

from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from civictrust.models.interaction import Interaction
from civictrust.models.rating import Rating
from civictrust.services.mutations import _upsert_insert, record_interaction, upsert_rating


class TestUpsertRating:
    async def test_first_submission_creates(self, db, make):
        org = await make.organization()
        rater = await make.member()

        rating, created = await upsert_rating(db, rater.id, org.id, "service", 4)

        assert created is True
        assert rating.score == 4

    async def test_second_submission_overwrites(self, db, make):
        org = await make.organization()
        rater = await make.member()
        first, _ = await upsert_rating(db, rater.id, org.id, "service", 2, review_text="slow")

        second, created = await upsert_rating(db, rater.id, org.id, "service", 5)

        count = (
            await db.execute(select(func.count(Rating.id)).where(Rating.organization_id == org.id))
        ).scalar_one()
        assert created is False
        assert count == 1
        assert second.id == first.id
        assert second.score == 5
        assert second.review_text is None

    async def test_categories_are_separate_ratings(self, db, make):
        org = await make.organization()
        rater = await make.member()
        await upsert_rating(db, rater.id, org.id, "service", 2)
        await upsert_rating(db, rater.id, org.id, "transparency", 3)

        count = (
            await db.execute(select(func.count(Rating.id)).where(Rating.organization_id == org.id))
        ).scalar_one()
        assert count == 2


class TestRecordInteraction:
    async def test_appends_row(self, db, make):
        org = await make.organization()
        user = await make.member()

        await record_interaction(db, org.id, user.id, "like")
        await record_interaction(db, org.id, user.id, "like", metadata={"source": "feed"})

        rows = (
            await db.execute(select(Interaction).where(Interaction.organization_id == org.id))
        ).scalars().all()
        assert len(rows) == 2
        assert {row.metadata_json is None for row in rows} == {True, False}


class TestUpsertInsert:
    def test_unsupported_dialect_rejected(self):
        session = SimpleNamespace(
            get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
        )
        with pytest.raises(ValueError, match="mysql"):
            _upsert_insert(session)
