"""
Unit tests for points, levels and the streak rule.
"""
from datetime import date

import pytest

from tracegreen.models.profile import Profile
from tracegreen.services.gamification import (
    apply_activity,
    days_to_milestone,
    level_for_points,
    next_streak,
)

D = date(2023, 6, 15)


def _profile(**kw) -> Profile:
    defaults = dict(
        email="g@example.com",
        total_points=0,
        current_level=1,
        current_streak=0,
        longest_streak=0,
        last_active_day=None,
    )
    defaults.update(kw)
    return Profile(**defaults)


class TestLevel:
    @pytest.mark.parametrize("points,level", [(0, 1), (499, 1), (500, 2), (1499, 3), (5000, 11)])
    def test_level_for_points(self, points, level):
        assert level_for_points(points, 500) == level


class TestNextStreak:
    def test_first_activity(self):
        assert next_streak(0, None, D) == 1

    def test_same_day_unchanged(self):
        assert next_streak(4, D, D) == 4

    def test_consecutive_day_increments(self):
        assert next_streak(4, date(2023, 6, 14), D) == 5

    def test_gap_resets(self):
        assert next_streak(4, date(2023, 6, 12), D) == 1

    def test_backfill_unchanged(self):
        assert next_streak(4, date(2023, 6, 20), D) == 4

    def test_same_day_with_zero_counter(self):
        assert next_streak(0, D, D) == 1


class TestApplyActivity:
    def test_points_and_level(self):
        p = _profile(total_points=495)
        apply_activity(p, D, 10, 500)
        assert p.total_points == 505
        assert p.current_level == 2

    def test_streak_and_longest(self):
        p = _profile(current_streak=3, longest_streak=3, last_active_day=date(2023, 6, 14))
        apply_activity(p, D, 10, 500)
        assert p.current_streak == 4
        assert p.longest_streak == 4
        assert p.last_active_day == D

    def test_reset_keeps_longest(self):
        p = _profile(current_streak=9, longest_streak=9, last_active_day=date(2023, 6, 1))
        apply_activity(p, D, 10, 500)
        assert p.current_streak == 1
        assert p.longest_streak == 9

    def test_backfill_does_not_move_last_active_day(self):
        p = _profile(current_streak=2, longest_streak=2, last_active_day=D)
        apply_activity(p, date(2023, 6, 1), 10, 500)
        assert p.last_active_day == D
        assert p.current_streak == 2
        assert p.total_points == 10


class TestMilestones:
    def test_week_milestone(self):
        assert days_to_milestone(0) == ("week", 7)
        assert days_to_milestone(6) == ("week", 1)

    def test_month_milestone(self):
        assert days_to_milestone(7) == ("month", 23)

    def test_past_month(self):
        assert days_to_milestone(30) is None
