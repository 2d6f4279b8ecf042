"""Seed demo data into the database and compute every derived score.

Loads sample members, organizations and activity from sample_civic_data.json,
then runs the reputation, trust score and ranking recomputes so the
leaderboard and dashboards have something to show.

Usage:
    cd api
    DATABASE_URL="postgresql+asyncpg://..." python -m fixtures.seed_fixtures

The script is idempotent: if the first sample member already exists it
prints "Already seeded" and exits.
"""
import asyncio
import json
from pathlib import Path

from sqlalchemy import select

from civictrust.database import async_session_factory
from civictrust.models import (
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
from civictrust.services.ranking import compute_rankings
from civictrust.services.reputation import recompute_all_reputations
from civictrust.services.trust import compute_organization_trust_score

FIXTURES_DIR = Path(__file__).parent
SAMPLE_DATA_FILE = FIXTURES_DIR / "sample_civic_data.json"


async def seed() -> None:
    """Load fixture data, then recompute all cached scores.

    Ratings and interactions are inserted directly rather than through the
    hooks; the recompute pass at the end covers every organization once.
    """
    with open(SAMPLE_DATA_FILE, "r") as fh:
        data = json.load(fh)

    async with async_session_factory() as session:
        first_email = data["members"][0]["email"]
        result = await session.execute(select(Member).where(Member.email == first_email))
        if result.scalar_one_or_none() is not None:
            print("Already seeded")
            return

        members = {}
        for row in data["members"]:
            member = Member(
                full_name=row.get("full_name"),
                email=row.get("email"),
                is_anonymous=row.get("is_anonymous", False),
                anonymous_display_name=row.get("anonymous_display_name"),
            )
            session.add(member)
            members[row["key"]] = member

        organizations = {}
        for row in data["organizations"]:
            org = Organization(name=row["name"], region=row.get("region"), category=row.get("category"))
            session.add(org)
            organizations[row["key"]] = org

        # Flush to get the IDs but don't commit yet
        await session.flush()

        petitions = []
        for row in data["petitions"]:
            petition = Petition(
                creator_id=members[row["creator"]].id,
                target_organization_id=organizations[row["target"]].id,
                title=row["title"],
                votes_for=row["votes_for"],
                votes_against=row["votes_against"],
            )
            session.add(petition)
            petitions.append(petition)
        await session.flush()

        for row in data["comments"]:
            session.add(
                Comment(
                    member_id=members[row["member"]].id,
                    petition_id=petitions[row["petition"]].id,
                    body=row["body"],
                )
            )
        for row in data["votes"]:
            session.add(
                Vote(
                    member_id=members[row["member"]].id,
                    petition_id=petitions[row["petition"]].id,
                    vote_type=row["vote_type"],
                )
            )
        for row in data["responses"]:
            session.add(
                PetitionResponse(
                    organization_id=organizations[row["organization"]].id,
                    petition_id=petitions[row["petition"]].id,
                    response_text=row["response_text"],
                )
            )
        for row in data["ratings"]:
            session.add(
                Rating(
                    rater_id=members[row["rater"]].id,
                    organization_id=organizations[row["organization"]].id,
                    category=row["category"],
                    score=row["score"],
                )
            )
        for row in data["interactions"]:
            session.add(
                Interaction(
                    organization_id=organizations[row["organization"]].id,
                    user_id=members[row["user"]].id,
                    interaction_type=row["interaction_type"],
                )
            )
        for row in data["followers"]:
            session.add(
                OrganizationFollower(
                    organization_id=organizations[row["organization"]].id,
                    member_id=members[row["member"]].id,
                )
            )
        for row in data["posts"]:
            session.add(
                OrganizationPost(
                    organization_id=organizations[row["organization"]].id,
                    body=row["body"],
                    visibility=row["visibility"],
                )
            )
        for row in data["projects"]:
            session.add(
                Project(
                    organization_id=organizations[row["organization"]].id,
                    title=row["title"],
                    status=row["status"],
                )
            )

        await session.commit()

        summary = await recompute_all_reputations(session)
        # Every trust score must be current before any rank is computed
        for org in organizations.values():
            await compute_organization_trust_score(session, org.id)
        for org in organizations.values():
            await compute_rankings(session, org.id)

    print(
        f"Seeded {len(members)} members and {len(organizations)} organizations "
        f"({summary['updated']} reputations computed)"
    )


if __name__ == "__main__":
    asyncio.run(seed())
