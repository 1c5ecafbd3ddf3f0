"""
Badge — an award granted automatically by the badge engine.

criteria_type values (see tracegreen/services/badge_engine.py):
  "carbon_logged"      — total kg CO2e logged >= criteria_value
  "activities_logged"  — number of logged activities >= criteria_value
  "streak_days"        — current streak >= criteria_value
  "points_earned"      — total points >= criteria_value

ProfileBadge is append-only; the unique constraint on (profile_id, badge_id)
keeps each badge to one award per profile.
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Integer, String, Text, Boolean, Numeric, DateTime, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from tracegreen.db.base import Base


class Badge(Base):
    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="award")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#3B82F6")
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="achievement")
    criteria_type: Mapped[str] = mapped_column(String(32), nullable=False)
    criteria_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    rarity: Mapped[str] = mapped_column(String(32), nullable=False, default="common")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ProfileBadge(Base):
    __tablename__ = "profile_badges"
    __table_args__ = (
        UniqueConstraint("profile_id", "badge_id", name="uq_profile_badge"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    badge_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("badges.id", ondelete="CASCADE"), nullable=False, index=True
    )
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
