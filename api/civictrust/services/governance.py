"""Democratic governance metrics for an organization dashboard.

Four independent whole-number percentages. They are display metrics and
unrelated to Organization.trust_score.

When a metric has no data it reports a plausible baseline instead of 0
(transparency 85, accountability 78, participation 50, trust 85). The
dashboard has always shown these baselines for new organizations and they
are kept as-is.
"""

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from civictrust.services.activity import GovernanceInputs, fetch_governance_inputs
from civictrust.services.trust import round_half_up

DEFAULT_TRANSPARENCY = 85
DEFAULT_ACCOUNTABILITY = 78
DEFAULT_PARTICIPATION = 50
DEFAULT_TRUST = 85

# Rating (1-5) to percent
RATING_TO_PERCENT = 20


@dataclass(frozen=True)
class GovernanceMetrics:
    transparency: int
    accountability: int
    participation: int
    trust: int

    def as_dict(self) -> dict:
        return asdict(self)


def score_governance(inputs: GovernanceInputs) -> GovernanceMetrics:
    if inputs.total_content_count > 0:
        transparency = inputs.public_content_count / inputs.total_content_count * 100
    else:
        transparency = DEFAULT_TRANSPARENCY

    if inputs.total_project_count > 0:
        accountability = inputs.completed_project_count / inputs.total_project_count * 100
    else:
        accountability = DEFAULT_ACCOUNTABILITY

    if inputs.follower_count > 0:
        participation = min(inputs.active_user_count / inputs.follower_count * 100, 100)
    else:
        participation = DEFAULT_PARTICIPATION

    if inputs.rating_scores:
        trust = sum(inputs.rating_scores) / len(inputs.rating_scores) * RATING_TO_PERCENT
    else:
        trust = DEFAULT_TRUST

    return GovernanceMetrics(
        transparency=int(round_half_up(transparency)),
        accountability=int(round_half_up(accountability)),
        participation=int(round_half_up(participation)),
        trust=int(round_half_up(trust)),
    )


async def compute_governance_metrics(
    db: AsyncSession,
    org_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> GovernanceMetrics:
    """Compute governance metrics for one organization. Read-only.

    Args:
        db: Async SQLAlchemy session.
        org_id: Organization to describe.
        now: End of the participation window. Defaults to the current UTC time.

    Raises:
        NotFoundError: the organization does not exist.
        DataUnavailableError: the store could not be read.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    inputs = await fetch_governance_inputs(db, org_id, now)
    return score_governance(inputs)
