"""
Points, levels and streaks.

Streak rule (stored counter, updated on every logged activity)
--------------------------------------------------------------
  no previous activity            -> 1
  same day as last activity       -> unchanged
  day after last activity         -> +1
  earlier than last activity      -> unchanged (backfill does not touch streaks)
  any other gap                   -> reset to 1

longest_streak is the high-water mark of current_streak.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from tracegreen.models.profile import Profile


def level_for_points(points: int, points_per_level: int) -> int:
    return points // points_per_level + 1


def next_streak(current: int, last_active_day: Optional[date], day: date) -> int:
    if last_active_day is None:
        return 1
    if day <= last_active_day:
        return max(current, 1)
    if day == last_active_day + timedelta(days=1):
        return current + 1
    return 1


def apply_activity(
    profile: Profile,
    day: date,
    points: int,
    points_per_level: int,
) -> None:
    """Mutate `profile` counters for one newly logged activity. Caller commits."""
    profile.total_points = (profile.total_points or 0) + points
    profile.current_level = level_for_points(profile.total_points, points_per_level)

    profile.current_streak = next_streak(
        profile.current_streak or 0, profile.last_active_day, day
    )
    profile.longest_streak = max(profile.longest_streak or 0, profile.current_streak)
    if profile.last_active_day is None or day > profile.last_active_day:
        profile.last_active_day = day


def days_to_milestone(streak: int) -> tuple[str, int] | None:
    """Next streak milestone (week, then month) and how many days remain."""
    if streak < 7:
        return "week", 7 - streak
    if streak < 30:
        return "month", 30 - streak
    return None
