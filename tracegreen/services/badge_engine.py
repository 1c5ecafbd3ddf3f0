"""
Badge engine — awards badges whose criterion a profile has reached.

Criteria kinds
--------------
  carbon_logged      total kg CO2e logged          >= criteria_value
  activities_logged  number of logged activities   >= criteria_value
  streak_days        current streak                >= criteria_value
  points_earned      total points                  >= criteria_value

Idempotency
-----------
Each (profile_id, badge_id) pair is unique in `profile_badges`. Badges the
profile already holds are skipped before insert. The engine only adds rows;
the caller owns the commit so an activity and the badges it unlocks land in
one transaction.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from tracegreen.models.activity import Activity
from tracegreen.models.badge import Badge, ProfileBadge
from tracegreen.models.profile import Profile

logger = logging.getLogger(__name__)


class CriteriaType(str, enum.Enum):
    carbon_logged = "carbon_logged"
    activities_logged = "activities_logged"
    streak_days = "streak_days"
    points_earned = "points_earned"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class ProfileProgress:
    carbon_logged: Decimal
    activities_logged: int
    streak_days: int
    points_earned: int


@dataclass
class AwardResult:
    """Summary of one evaluation run."""
    profile_id: int
    awarded: list[Badge] = field(default_factory=list)
    already_held: int = 0


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------

def progress_for(db: Session, profile: Profile) -> ProfileProgress:
    carbon, count = (
        db.query(
            func.coalesce(func.sum(Activity.carbon_value), 0),
            func.count(Activity.id),
        )
        .filter(Activity.profile_id == profile.id)
        .one()
    )
    return ProfileProgress(
        carbon_logged=Decimal(str(carbon)),
        activities_logged=int(count),
        streak_days=profile.current_streak or 0,
        points_earned=profile.total_points or 0,
    )


def criterion_met(criteria_type: str, criteria_value, progress: ProfileProgress) -> bool:
    """
    True when `progress` satisfies the criterion. Unknown criteria kinds never
    match; the admin schema rejects them on write.
    """
    try:
        kind = CriteriaType(criteria_type)
    except ValueError:
        logger.warning("Skipping badge with unknown criteria_type %r", criteria_type)
        return False
    threshold = Decimal(str(criteria_value))
    actual = getattr(progress, kind.value)
    return Decimal(str(actual)) >= threshold


# ---------------------------------------------------------------------------
# Public: main entry point
# ---------------------------------------------------------------------------

def evaluate_badges(db: Session, profile: Profile) -> AwardResult:
    """
    Stage ProfileBadge rows for every active badge the profile now qualifies
    for and does not already hold. Flushes, does not commit.
    """
    result = AwardResult(profile_id=profile.id)

    held = {
        row.badge_id
        for row in db.query(ProfileBadge.badge_id)
        .filter(ProfileBadge.profile_id == profile.id)
        .all()
    }
    badges = (
        db.query(Badge)
        .filter(Badge.is_active == True)  # noqa: E712
        .order_by(Badge.id)
        .all()
    )
    if not badges:
        return result

    progress = progress_for(db, profile)
    for badge in badges:
        if badge.id in held:
            result.already_held += 1
            continue
        if criterion_met(badge.criteria_type, badge.criteria_value, progress):
            db.add(ProfileBadge(profile_id=profile.id, badge_id=badge.id))
            result.awarded.append(badge)

    if result.awarded:
        db.flush()
        logger.info(
            "Profile %s earned badges: %s",
            profile.id, ", ".join(b.name for b in result.awarded),
        )
    return result


# ---------------------------------------------------------------------------
# Public: query helpers
# ---------------------------------------------------------------------------

def get_profile_badges(db: Session, profile_id: int) -> list[tuple[ProfileBadge, Badge]]:
    """Earned badges for a profile, newest first."""
    return (
        db.query(ProfileBadge, Badge)
        .join(Badge, Badge.id == ProfileBadge.badge_id)
        .filter(ProfileBadge.profile_id == profile_id)
        .order_by(ProfileBadge.earned_at.desc(), ProfileBadge.id.desc())
        .all()
    )
