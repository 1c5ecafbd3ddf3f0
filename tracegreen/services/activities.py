"""
Activity service: log an activity and query activities by date window.

log_activity runs, in one transaction:
  1. Emission Estimator        -> carbon_value (raises on unknown activity)
  2. insert carbon_activities row
  3. points / level / streak   (services/gamification.py)
  4. badge engine              (services/badge_engine.py)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.core.config import settings
from tracegreen.core.errors import FutureDayError
from tracegreen.models.activity import Activity
from tracegreen.models.badge import Badge
from tracegreen.services import gamification
from tracegreen.services.aggregation import (
    CarbonSummary, Window, summarize, total_carbon, window_bounds,
)
from tracegreen.services.badge_engine import evaluate_badges
from tracegreen.services.emissions import EmissionEstimator, default_estimator, to_quantity
from tracegreen.services.profiles import get_active_profile, get_profile

logger = logging.getLogger(__name__)


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


@dataclass
class LogResult:
    activity: Activity
    points_awarded: int
    badges_awarded: list[Badge]


def log_activity(
    db: Session,
    profile_id: int,
    category: str,
    activity_type: str,
    quantity,
    note: Optional[str] = None,
    day: Optional[date] = None,
    estimator: EmissionEstimator = default_estimator,
) -> LogResult:
    profile = get_active_profile(db, profile_id)
    today = _today()
    target = day or today
    if target > today:
        raise FutureDayError(target, today)

    factor = estimator.get_factor(category, activity_type)
    qty = to_quantity(quantity)
    carbon_value = estimator.estimate(category, activity_type, qty)

    activity = Activity(
        profile_id=profile.id,
        category=factor.category,
        activity_type=factor.activity,
        quantity=qty,
        unit=factor.unit,
        carbon_value=carbon_value,
        note=note,
        day=target,
    )
    db.add(activity)
    db.flush()

    points = settings.POINTS_PER_ACTIVITY
    gamification.apply_activity(profile, target, points, settings.POINTS_PER_LEVEL)
    awards = evaluate_badges(db, profile)

    db.commit()
    db.refresh(activity)
    logger.info(
        "Profile %s logged %s/%s qty=%s -> %s kg CO2e",
        profile.id, factor.category, factor.activity, activity.quantity, carbon_value,
    )
    return LogResult(activity=activity, points_awarded=points, badges_awarded=awards.awarded)


def list_activities(
    db: Session,
    profile_id: int,
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[Activity]]:
    """Return (total, page) ordered newest first."""
    get_profile(db, profile_id)
    q = db.query(Activity).filter(Activity.profile_id == profile_id)
    if category:
        q = q.filter(Activity.category == category)
    total = q.count()
    items = (
        q.order_by(Activity.day.desc(), Activity.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items


def activities_between(db: Session, profile_id: int, start: date, end: date) -> list[Activity]:
    """Activities with start <= day <= end. The date filter lives in the query."""
    return (
        db.query(Activity)
        .filter(
            Activity.profile_id == profile_id,
            Activity.day >= start,
            Activity.day <= end,
        )
        .all()
    )


def count_activities(db: Session, profile_id: int) -> int:
    return db.query(Activity).filter(Activity.profile_id == profile_id).count()


def window_summary(
    db: Session,
    profile_id: int,
    window: Window = Window.week,
    reference_date: Optional[date] = None,
) -> CarbonSummary:
    start, end = window_bounds(window, reference_date or _today())
    return summarize(activities_between(db, profile_id, start, end), start, end)


def carbon_between(db: Session, profile_id: int, start: date, end: date) -> Decimal:
    return total_carbon(activities_between(db, profile_id, start, end))
