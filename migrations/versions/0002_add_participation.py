"""add challenge participation and community membership

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18

challenges.current_participants is a running counter bumped on every join;
challenge_participants holds one row per (challenge, profile).
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "challenges",
        sa.Column("current_participants", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "challenge_participants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("progress", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["challenge_id"], ["challenges.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("challenge_id", "profile_id", name="uq_challenge_participant"),
    )
    op.create_index("ix_challenge_participants_id", "challenge_participants", ["id"])
    op.create_index(
        "ix_challenge_participants_challenge_id", "challenge_participants", ["challenge_id"]
    )
    op.create_index(
        "ix_challenge_participants_profile_id", "challenge_participants", ["profile_id"]
    )

    op.create_table(
        "community_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("community_id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(32), nullable=False, server_default="member"),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["community_id"], ["communities.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("community_id", "profile_id", name="uq_community_member"),
    )
    op.create_index("ix_community_members_id", "community_members", ["id"])
    op.create_index("ix_community_members_community_id", "community_members", ["community_id"])
    op.create_index("ix_community_members_profile_id", "community_members", ["profile_id"])


def downgrade() -> None:
    op.drop_table("community_members")
    op.drop_table("challenge_participants")
    op.drop_column("challenges", "current_participants")
