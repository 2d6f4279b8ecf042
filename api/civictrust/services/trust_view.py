"""Display views derived from a reputation or trust score.

Pure functions, called on every render and never cached. Threshold tables
are ordered highest first; the first threshold the score reaches wins.
"""

import math
from dataclasses import dataclass

from civictrust.services.reputation import REPUTATION_MAX

MAX_STARS = 5.0


@dataclass(frozen=True)
class ReputationLevel:
    name: str
    color: str


@dataclass(frozen=True)
class TrustView:
    rating: float
    rating_display: str
    level: ReputationLevel
    badge: str
    progress_percent: int


# (minimum reputation, level)
REPUTATION_LEVELS: list[tuple[int, ReputationLevel]] = [
    (8000, ReputationLevel("Champion", "#FFD700")),
    (5000, ReputationLevel("Leader", "#FF6B35")),
    (2500, ReputationLevel("Activist", "#4ECDC4")),
    (1000, ReputationLevel("Contributor", "#95E1D3")),
    (500, ReputationLevel("Participant", "#C7CEEA")),
]
NEWCOMER = ReputationLevel("Newcomer", "#E0E0E0")

REPUTATION_BADGES: list[tuple[int, str]] = [
    (8000, "🏆"),
    (5000, "⭐"),
    (2500, "🎖️"),
    (1000, "🥉"),
    (500, "📍"),
]
NEWCOMER_BADGE = "🌱"

# (minimum trust score, label, color, icon) for organization trust scores
TRUST_SCORE_LABELS: list[tuple[float, str, str, str]] = [
    (80, "Excellent", "#34C759", "⭐"),
    (60, "Good", "#0066FF", "👍"),
    (40, "Fair", "#FF9500", "⚠️"),
]
TRUST_SCORE_FLOOR_LABEL = ("Needs Improvement", "#FF3B30", "⚠️")


def trust_rating(reputation_score: int) -> float:
    """Map reputation onto 0-5 stars, rounded to two decimals."""
    rating = reputation_score / REPUTATION_MAX * MAX_STARS
    return round(min(max(rating, 0.0), MAX_STARS), 2)


def reputation_level(reputation_score: int) -> ReputationLevel:
    for threshold, level in REPUTATION_LEVELS:
        if reputation_score >= threshold:
            return level
    return NEWCOMER


def reputation_badge(reputation_score: int) -> str:
    for threshold, badge in REPUTATION_BADGES:
        if reputation_score >= threshold:
            return badge
    return NEWCOMER_BADGE


def progress_percent(reputation_score: int) -> int:
    """Share of the maximum reputation reached, as a whole percent in [0, 100]."""
    percent = math.floor(reputation_score / REPUTATION_MAX * 100)
    return max(0, min(percent, 100))


def derive_trust_view(reputation_score: int) -> TrustView:
    rating = trust_rating(reputation_score)
    return TrustView(
        rating=rating,
        rating_display=f"{rating:.2f}",
        level=reputation_level(reputation_score),
        badge=reputation_badge(reputation_score),
        progress_percent=progress_percent(reputation_score),
    )


def organization_trust_label(trust_score: float) -> dict:
    """Describe an organization trust score for display.

    Returns:
        {"label": str, "color": str, "icon": str}
    """
    for threshold, label, color, icon in TRUST_SCORE_LABELS:
        if trust_score >= threshold:
            return {"label": label, "color": color, "icon": icon}
    label, color, icon = TRUST_SCORE_FLOOR_LABEL
    return {"label": label, "color": color, "icon": icon}
