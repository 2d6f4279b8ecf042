"""Initial CivicTrust schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the member and petition activity tables, organizations with their
cached trust score and rank columns, and the rating, interaction, follower,
post, project and petition-response tables the scorers read.
Written manually (not via autogenerate) consistent with project migration policy.
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("anonymous_display_name", sa.String(100), nullable=True),
        sa.Column("reputation_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reputation_computed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_members_reputation_score", "members", ["reputation_score"])

    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("region", sa.String(100), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("trust_score", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("trust_score_computed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("national_rank", sa.Integer(), nullable=True),
        sa.Column("regional_rank", sa.Integer(), nullable=True),
        sa.Column("category_rank", sa.Integer(), nullable=True),
        sa.Column("ranks_computed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_organizations_region", "organizations", ["region"])
    op.create_index("ix_organizations_category", "organizations", ["category"])
    op.create_index("ix_organizations_trust_score", "organizations", ["trust_score"])

    op.create_table(
        "petitions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("members.id"), nullable=False),
        sa.Column(
            "target_organization_id",
            sa.Uuid(),
            sa.ForeignKey("organizations.id"),
            nullable=True,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("votes_for", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("votes_against", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_petitions_creator_id", "petitions", ["creator_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("petition_id", sa.Uuid(), sa.ForeignKey("petitions.id"), nullable=False),
        sa.Column("member_id", sa.Uuid(), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_comments_member_id", "comments", ["member_id"])

    op.create_table(
        "votes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("petition_id", sa.Uuid(), sa.ForeignKey("petitions.id"), nullable=False),
        sa.Column("member_id", sa.Uuid(), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("vote_type", sa.String(10), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "petition_id", "member_id", name="uq_votes_petition_id_member_id"
        ),
    )
    op.create_index("ix_votes_member_id", "votes", ["member_id"])

    op.create_table(
        "organization_followers",
        sa.Column(
            "organization_id",
            sa.Uuid(),
            sa.ForeignKey("organizations.id"),
            primary_key=True,
        ),
        sa.Column("member_id", sa.Uuid(), sa.ForeignKey("members.id"), primary_key=True),
        _created_at(),
    )

    op.create_table(
        "organization_posts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "organization_id", sa.Uuid(), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("visibility", sa.String(20), nullable=False, server_default="public"),
        _created_at(),
    )
    op.create_index(
        "ix_organization_posts_organization_id", "organization_posts", ["organization_id"]
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "organization_id", sa.Uuid(), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="planned"),
        _created_at(),
    )
    op.create_index("ix_projects_organization_id", "projects", ["organization_id"])

    op.create_table(
        "organization_ratings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("rater_id", sa.Uuid(), sa.ForeignKey("members.id"), nullable=False),
        sa.Column(
            "organization_id", sa.Uuid(), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("review_text", sa.Text(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint(
            "rater_id",
            "organization_id",
            "category",
            name="uq_organization_ratings_rater_organization_category",
        ),
    )
    op.create_index(
        "ix_organization_ratings_organization_id", "organization_ratings", ["organization_id"]
    )

    op.create_table(
        "organization_interactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "organization_id", sa.Uuid(), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("interaction_type", sa.String(30), nullable=False),
        sa.Column("content_id", sa.Uuid(), nullable=True),
        sa.Column("metadata_json", sa.JSON(), nullable=True),
        _created_at(),
    )
    op.create_index(
        "ix_organization_interactions_org_created",
        "organization_interactions",
        ["organization_id", "created_at"],
    )

    op.create_table(
        "petition_responses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "organization_id", sa.Uuid(), sa.ForeignKey("organizations.id"), nullable=False
        ),
        sa.Column("petition_id", sa.Uuid(), sa.ForeignKey("petitions.id"), nullable=False),
        sa.Column("response_text", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_petition_responses_organization_id", "petition_responses", ["organization_id"]
    )


def downgrade() -> None:
    # Children before parents
    op.drop_table("petition_responses")
    op.drop_table("organization_interactions")
    op.drop_table("organization_ratings")
    op.drop_table("projects")
    op.drop_table("organization_posts")
    op.drop_table("organization_followers")
    op.drop_table("votes")
    op.drop_table("comments")
    op.drop_table("petitions")
    op.drop_table("organizations")
    op.drop_table("members")
