"""Tests for reputation display views in civictrust.services.trust_view."""

import pytest

from civictrust.services.trust_view import (
    derive_trust_view,
    organization_trust_label,
    reputation_badge,
    reputation_level,
    trust_rating,
)


class TestDeriveTrustView:
    def test_zero_is_newcomer_with_no_stars(self):
        view = derive_trust_view(0)
        assert view.rating == 0.0
        assert view.rating_display == "0.00"
        assert view.level.name == "Newcomer"
        assert view.badge == "🌱"
        assert view.progress_percent == 0

    def test_maximum_is_champion_with_five_stars(self):
        view = derive_trust_view(10000)
        assert view.rating == 5.0
        assert view.rating_display == "5.00"
        assert view.level.name == "Champion"
        assert view.level.color == "#FFD700"
        assert view.badge == "🏆"
        assert view.progress_percent == 100

    def test_activist_threshold_is_inclusive(self):
        assert derive_trust_view(2500).level.name == "Activist"
        assert derive_trust_view(2499).level.name == "Contributor"

    @pytest.mark.parametrize(
        "score,level",
        [
            (499, "Newcomer"),
            (500, "Participant"),
            (999, "Participant"),
            (1000, "Contributor"),
            (4999, "Activist"),
            (5000, "Leader"),
            (7999, "Leader"),
            (8000, "Champion"),
        ],
    )
    def test_level_thresholds(self, score, level):
        assert reputation_level(score).name == level

    @pytest.mark.parametrize(
        "score,badge",
        [(0, "🌱"), (500, "📍"), (1000, "🥉"), (2500, "🎖️"), (5000, "⭐"), (8000, "🏆")],
    )
    def test_badge_follows_level_breakpoints(self, score, badge):
        assert reputation_badge(score) == badge

    def test_rating_two_decimals(self):
        assert trust_rating(1234) == 0.62
        assert derive_trust_view(1234).rating_display == "0.62"

    def test_rating_clamped_outside_range(self):
        assert trust_rating(-100) == 0.0
        assert trust_rating(20000) == 5.0
        assert derive_trust_view(20000).progress_percent == 100


class TestOrganizationTrustLabel:
    @pytest.mark.parametrize(
        "trust_score,label",
        [(100, "Excellent"), (80, "Excellent"), (79.9, "Good"), (60, "Good"),
         (40, "Fair"), (39.9, "Needs Improvement"), (0, "Needs Improvement")],
    )
    def test_label_thresholds(self, trust_score, label):
        assert organization_trust_label(trust_score)["label"] == label
