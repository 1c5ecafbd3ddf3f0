"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- ENUM types ---
    activity_category_enum = sa.Enum(
        "transportation", "energy", "food", "waste", name="activity_category_enum"
    )
    activity_category_enum.create(op.get_bind(), checkfirst=True)

    goal_type_enum = sa.Enum("daily", "weekly", "monthly", "yearly", name="goal_type_enum")
    goal_type_enum.create(op.get_bind(), checkfirst=True)

    goal_status_enum = sa.Enum(
        "active", "completed", "failed", "paused", name="goal_status_enum"
    )
    goal_status_enum.create(op.get_bind(), checkfirst=True)

    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(128), nullable=True),
        sa.Column("location", sa.String(128), nullable=True),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active_day", sa.Date(), nullable=True),
        sa.Column("carbon_goal_monthly", sa.Numeric(12, 2), nullable=False, server_default="500"),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ban_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"])
    op.create_index("ix_profiles_email", "profiles", ["email"])

    # --- carbon_activities ---
    op.create_table(
        "carbon_activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("category", sa.Enum(
            "transportation", "energy", "food", "waste",
            name="activity_category_enum", create_type=False,
        ), nullable=False),
        sa.Column("activity_type", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False),
        sa.Column("carbon_value", sa.Numeric(18, 2), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("day", sa.Date(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_carbon_activities_id", "carbon_activities", ["id"])
    op.create_index("ix_carbon_activities_profile_id", "carbon_activities", ["profile_id"])
    op.create_index("ix_carbon_activities_category", "carbon_activities", ["category"])
    op.create_index("ix_carbon_activities_day", "carbon_activities", ["day"])

    # --- carbon_goals ---
    op.create_table(
        "carbon_goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("goal_type", sa.Enum(
            "daily", "weekly", "monthly", "yearly", name="goal_type_enum", create_type=False,
        ), nullable=False),
        sa.Column("target_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.Enum(
            "active", "completed", "failed", "paused", name="goal_status_enum", create_type=False,
        ), nullable=False, server_default="active"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_carbon_goals_id", "carbon_goals", ["id"])
    op.create_index("ix_carbon_goals_profile_id", "carbon_goals", ["profile_id"])

    # --- challenges ---
    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("challenge_type", sa.String(64), nullable=False, server_default="carbon_reduction"),
        sa.Column("difficulty", sa.String(32), nullable=False, server_default="beginner"),
        sa.Column("target_value", sa.Numeric(14, 2), nullable=False, server_default="50"),
        sa.Column("target_unit", sa.String(32), nullable=False, server_default="kg CO2"),
        sa.Column("points_reward", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_challenges_id", "challenges", ["id"])

    # --- badges ---
    op.create_table(
        "badges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(64), nullable=False, server_default="award"),
        sa.Column("color", sa.String(16), nullable=False, server_default="#3B82F6"),
        sa.Column("category", sa.String(64), nullable=False, server_default="achievement"),
        sa.Column("criteria_type", sa.String(32), nullable=False),
        sa.Column("criteria_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("rarity", sa.String(32), nullable=False, server_default="common"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_badges_id", "badges", ["id"])

    # --- profile_badges ---
    op.create_table(
        "profile_badges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("badge_id", sa.Integer(), nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["badge_id"], ["badges.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "badge_id", name="uq_profile_badge"),
    )
    op.create_index("ix_profile_badges_id", "profile_badges", ["id"])
    op.create_index("ix_profile_badges_profile_id", "profile_badges", ["profile_id"])
    op.create_index("ix_profile_badges_badge_id", "profile_badges", ["badge_id"])

    # --- rewards ---
    op.create_table(
        "rewards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False, server_default="general"),
        sa.Column("points_cost", sa.Integer(), nullable=False),
        sa.Column("stock_quantity", sa.Integer(), nullable=True),
        sa.Column("partner_name", sa.String(128), nullable=True),
        sa.Column("terms_conditions", sa.Text(), nullable=True),
        sa.Column("expiry_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rewards_id", "rewards", ["id"])

    # --- reward_redemptions ---
    op.create_table(
        "reward_redemptions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("reward_id", sa.Integer(), nullable=False),
        sa.Column("points_spent", sa.Integer(), nullable=False),
        sa.Column("redemption_code", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="confirmed"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reward_id"], ["rewards.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("redemption_code"),
    )
    op.create_index("ix_reward_redemptions_id", "reward_redemptions", ["id"])
    op.create_index("ix_reward_redemptions_profile_id", "reward_redemptions", ["profile_id"])
    op.create_index("ix_reward_redemptions_reward_id", "reward_redemptions", ["reward_id"])

    # --- educational_content ---
    op.create_table(
        "educational_content",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False, server_default="general"),
        sa.Column("difficulty", sa.String(32), nullable=False, server_default="beginner"),
        sa.Column("estimated_read_time", sa.Integer(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_educational_content_id", "educational_content", ["id"])

    # --- communities ---
    op.create_table(
        "communities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False, server_default="general"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("creator_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["creator_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_communities_id", "communities", ["id"])

    # --- default badges ---
    badges = sa.table(
        "badges",
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("icon", sa.String),
        sa.column("criteria_type", sa.String),
        sa.column("criteria_value", sa.Numeric),
        sa.column("rarity", sa.String),
    )
    op.bulk_insert(badges, [
        {"name": "First Step", "description": "Logged your first activity.",
         "icon": "footprints", "criteria_type": "activities_logged", "criteria_value": 1,
         "rarity": "common"},
        {"name": "Carbon Counter", "description": "Logged 100 kg CO2e in total.",
         "icon": "leaf", "criteria_type": "carbon_logged", "criteria_value": 100,
         "rarity": "common"},
        {"name": "Week Warrior", "description": "Kept a 7-day logging streak.",
         "icon": "flame", "criteria_type": "streak_days", "criteria_value": 7,
         "rarity": "rare"},
        {"name": "Month Master", "description": "Kept a 30-day logging streak.",
         "icon": "calendar", "criteria_type": "streak_days", "criteria_value": 30,
         "rarity": "epic"},
        {"name": "Point Collector", "description": "Earned 1000 points.",
         "icon": "star", "criteria_type": "points_earned", "criteria_value": 1000,
         "rarity": "rare"},
    ])


def downgrade() -> None:
    op.drop_table("communities")
    op.drop_table("educational_content")
    op.drop_table("reward_redemptions")
    op.drop_table("rewards")
    op.drop_table("profile_badges")
    op.drop_table("badges")
    op.drop_table("challenges")
    op.drop_table("carbon_goals")
    op.drop_table("carbon_activities")
    op.drop_table("profiles")

    op.execute("DROP TYPE IF EXISTS goal_status_enum")
    op.execute("DROP TYPE IF EXISTS goal_type_enum")
    op.execute("DROP TYPE IF EXISTS activity_category_enum")
