"""Locust load test: concurrent trust-score recomputation on one organization.

Many raters submit ratings for the same organization at once while other
users read the leaderboard and governance metrics. Each rating triggers a
full trust-score recompute, so this exercises the read-aggregate-write cycle
under contention.

Without RECOMPUTE_LOCK_ENABLED the stored trust_score may briefly lag the
latest ratings (last writer wins). After the run, POST
/api/v1/organizations/{id}/trust-score once and compare: the value must
match what the final recompute persisted.

Run command:
    TARGET_ORG_ID=<uuid> RATER_IDS=<uuid>,<uuid>,... locust \\
      -f tests/load/locustfile_recompute.py \\
      --host http://localhost:8000 \\
      --users 20 --spawn-rate 5 --run-time 60s \\
      --headless --only-summary --csv=results/recompute

Prerequisites:
    1. Start the API against a seeded database (python -m fixtures.seed_fixtures)
    2. Export the organization and member ids to use
    3. mkdir -p results/
"""

import os
import random

from locust import HttpUser, between, task

TARGET_ORG_ID = os.environ.get("TARGET_ORG_ID", "")
RATER_IDS = [r for r in os.environ.get("RATER_IDS", "").split(",") if r]
CATEGORIES = ["responsiveness", "transparency", "service"]


class RatingBurstUser(HttpUser):
    """Submits ratings for one organization as fast as the server allows."""

    wait_time = between(0.05, 0.2)

    @task(3)
    def submit_rating(self) -> None:
        if not TARGET_ORG_ID or not RATER_IDS:
            return
        self.client.put(
            f"/api/v1/organizations/{TARGET_ORG_ID}/ratings",
            json={
                "rater_id": random.choice(RATER_IDS),
                "category": random.choice(CATEGORIES),
                "score": random.randint(1, 5),
            },
            name="/api/v1/organizations/[id]/ratings",
        )

    @task(1)
    def read_governance(self) -> None:
        if not TARGET_ORG_ID:
            return
        self.client.get(
            f"/api/v1/organizations/{TARGET_ORG_ID}/governance",
            name="/api/v1/organizations/[id]/governance",
        )


class LeaderboardReader(HttpUser):
    """Reads the leaderboard while scores are being rewritten."""

    wait_time = between(0.5, 1.0)

    @task
    def leaderboard(self) -> None:
        self.client.get("/api/v1/leaderboard?limit=100", name="/api/v1/leaderboard")
