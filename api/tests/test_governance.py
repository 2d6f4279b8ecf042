"""Tests for governance metrics in civictrust.services.governance."""

from datetime import timedelta

import pytest

from civictrust.services.activity import GovernanceInputs
from civictrust.services.errors import NotFoundError
from civictrust.services.governance import (
    GovernanceMetrics,
    compute_governance_metrics,
    score_governance,
)


class TestScoreGovernance:
    def test_no_data_reports_baselines(self):
        """New organizations show the product baselines, not zeros."""
        assert score_governance(GovernanceInputs()) == GovernanceMetrics(
            transparency=85, accountability=78, participation=50, trust=85
        )

    def test_ratios_rounded_to_whole_percent(self):
        inputs = GovernanceInputs(
            public_content_count=2,
            total_content_count=3,
            completed_project_count=1,
            total_project_count=8,
            follower_count=6,
            active_user_count=1,
            rating_scores=[3, 4],
        )
        assert score_governance(inputs) == GovernanceMetrics(
            transparency=67, accountability=13, participation=17, trust=70
        )

    def test_participation_capped_at_hundred(self):
        inputs = GovernanceInputs(follower_count=2, active_user_count=9)
        assert score_governance(inputs).participation == 100

    def test_half_rounds_up(self):
        inputs = GovernanceInputs(public_content_count=1, total_content_count=8)  # 12.5
        assert score_governance(inputs).transparency == 13

    def test_zero_public_content_is_zero_not_baseline(self):
        inputs = GovernanceInputs(public_content_count=0, total_content_count=4)
        assert score_governance(inputs).transparency == 0


class TestComputeGovernanceMetrics:
    async def test_empty_organization_gets_defaults(self, db, make):
        org = await make.organization()
        metrics = await compute_governance_metrics(db, org.id)
        assert metrics.as_dict() == {
            "transparency": 85,
            "accountability": 78,
            "participation": 50,
            "trust": 85,
        }

    async def test_reads_stored_activity(self, db, make, now):
        org = await make.organization()
        alice = await make.member(full_name="Alice")
        bob = await make.member(full_name="Bob")
        carol = await make.member(full_name="Carol")
        dan = await make.member(full_name="Dan")

        await make.post(org, "public")
        await make.post(org, "public")
        await make.post(org, "public")
        await make.post(org, "private")  # 3/4 -> 75

        await make.project(org, "completed")
        await make.project(org, "active")  # 1/2 -> 50

        for member in (alice, bob, carol, dan):
            await make.follower(org, member)
        await make.interaction(org, alice, "like", created_at=now - timedelta(days=1))
        await make.interaction(org, alice, "share", created_at=now - timedelta(days=2))
        await make.interaction(org, bob, "view", created_at=now - timedelta(days=29))
        await make.interaction(org, carol, "like", created_at=now - timedelta(days=45))
        # alice + bob active in the window -> 2/4 -> 50

        await make.rating(alice, org, 5)
        await make.rating(bob, org, 4)  # 4.5 * 20 -> 90

        metrics = await compute_governance_metrics(db, org.id, now=now)

        assert metrics == GovernanceMetrics(
            transparency=75, accountability=50, participation=50, trust=90
        )

    async def test_missing_organization_raises_not_found(self, db, missing_id):
        with pytest.raises(NotFoundError):
            await compute_governance_metrics(db, missing_id)
