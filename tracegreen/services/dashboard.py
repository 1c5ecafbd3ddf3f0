"""
Dashboard service — one read that hydrates every dashboard widget.

Windows end on reference_date (default: today UTC):
  today  = [ref, ref]
  week   = [ref - 6, ref]
  month  = [ref - 29, ref]

Monthly goal progress = min(month_total / carbon_goal_monthly * 100, 100).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.models.badge import ProfileBadge
from tracegreen.services.activities import count_activities, window_summary
from tracegreen.services.aggregation import CategoryShare, Window
from tracegreen.services.gamification import days_to_milestone
from tracegreen.services.goals import progress_percent
from tracegreen.services.profiles import get_profile


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


@dataclass
class DashboardStats:
    reference_date: date
    today_carbon: Decimal
    week_carbon: Decimal
    month_carbon: Decimal
    monthly_goal: Decimal
    monthly_goal_progress: Decimal
    today_completed: bool
    total_points: int
    level: int
    current_streak: int
    longest_streak: int
    next_milestone: Optional[str]
    days_to_next_milestone: Optional[int]
    activities_count: int
    badges_count: int
    month_shares: list[CategoryShare]


def build_dashboard(
    db: Session,
    profile_id: int,
    reference_date: Optional[date] = None,
) -> DashboardStats:
    profile = get_profile(db, profile_id)
    ref = reference_date or _today()

    today = window_summary(db, profile.id, Window.today, ref)
    week = window_summary(db, profile.id, Window.week, ref)
    month = window_summary(db, profile.id, Window.month, ref)

    badges_count = (
        db.query(ProfileBadge).filter(ProfileBadge.profile_id == profile.id).count()
    )
    milestone = days_to_milestone(profile.current_streak)

    return DashboardStats(
        reference_date=ref,
        today_carbon=today.total,
        week_carbon=week.total,
        month_carbon=month.total,
        monthly_goal=profile.carbon_goal_monthly,
        monthly_goal_progress=progress_percent(month.total, profile.carbon_goal_monthly),
        today_completed=today.activity_count > 0,
        total_points=profile.total_points,
        level=profile.current_level,
        current_streak=profile.current_streak,
        longest_streak=profile.longest_streak,
        next_milestone=milestone[0] if milestone else None,
        days_to_next_milestone=milestone[1] if milestone else None,
        activities_count=count_activities(db, profile.id),
        badges_count=badges_count,
        month_shares=month.shares,
    )
