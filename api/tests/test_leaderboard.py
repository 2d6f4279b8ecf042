"""Tests for the reputation leaderboard and display-name policy."""

from civictrust.models.member import Member
from civictrust.services.anonymity import get_display_name
from civictrust.services.leaderboard import get_leaderboard


class TestGetLeaderboard:
    async def test_ordered_by_reputation_descending(self, db, make):
        await make.member(full_name="Low", reputation_score=10)
        await make.member(full_name="Mid", reputation_score=500)
        await make.member(full_name="Top", reputation_score=9999)

        entries = await get_leaderboard(db, 3)

        assert [e.reputation_score for e in entries] == [9999, 500, 10]
        assert [e.rank for e in entries] == [1, 2, 3]
        assert [e.display_name for e in entries] == ["Top", "Mid", "Low"]

    async def test_medals_for_top_three_only(self, db, make):
        for score in (100, 200, 300, 400):
            await make.member(reputation_score=score)

        entries = await get_leaderboard(db, 10)

        assert [e.rank_badge for e in entries] == ["🥇", "🥈", "🥉", None]
        assert entries[3].rank == 4

    async def test_limit_respected(self, db, make):
        for score in range(5):
            await make.member(reputation_score=score)
        assert len(await get_leaderboard(db, 2)) == 2

    async def test_entries_carry_trust_view(self, db, make):
        await make.member(reputation_score=8000)
        entry = (await get_leaderboard(db, 1))[0]
        assert entry.trust_view.level.name == "Champion"
        assert entry.trust_view.rating == 4.0

    async def test_anonymous_member_shows_alias(self, db, make):
        await make.member(
            full_name="Real Name",
            is_anonymous=True,
            anonymous_display_name="VoiceOfJustice204",
            reputation_score=50,
        )
        entry = (await get_leaderboard(db, 1))[0]
        assert entry.display_name == "VoiceOfJustice204"

    async def test_empty(self, db):
        assert await get_leaderboard(db, 100) == []


class TestGetDisplayName:
    def test_missing_member(self):
        assert get_display_name(None) == "Unknown User"

    def test_anonymous_without_alias_falls_back_to_name(self):
        member = Member(full_name="Dana Park", is_anonymous=True, anonymous_display_name=None)
        assert get_display_name(member) == "Dana Park"

    def test_email_local_part_when_no_name(self):
        member = Member(full_name=None, email="dana.park@example.org", is_anonymous=False)
        assert get_display_name(member) == "dana.park"

    def test_generic_fallback(self):
        member = Member(full_name=None, email=None, is_anonymous=False)
        assert get_display_name(member) == "User"
