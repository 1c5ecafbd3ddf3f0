"""
Carbon goals. Progress is derived on read from logged activities; nothing
about progress is stored on the goal row.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.core.errors import NotFoundError
from tracegreen.models.goal import CarbonGoal, GoalStatus
from tracegreen.services.activities import carbon_between
from tracegreen.services.profiles import get_active_profile, get_profile

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


@dataclass
class GoalProgress:
    goal: CarbonGoal
    current_amount: Decimal
    progress_percent: Decimal   # 0.00 – 100.00
    days_remaining: int


def progress_percent(current: Decimal, target: Decimal) -> Decimal:
    if target == 0:
        return Decimal("0.00")
    raw = min(Decimal(current) / Decimal(target) * _HUNDRED, _HUNDRED)
    return raw.quantize(_CENT, rounding=ROUND_HALF_UP)


def days_remaining(end_date: date, today: date) -> int:
    return max(0, (end_date - today).days)


def create_goal(
    db: Session,
    profile_id: int,
    goal_type: str,
    target_amount: Decimal,
    start_date: date,
    end_date: date,
) -> CarbonGoal:
    profile = get_active_profile(db, profile_id)
    goal = CarbonGoal(
        profile_id=profile.id,
        goal_type=goal_type,
        target_amount=target_amount,
        start_date=start_date,
        end_date=end_date,
        status=GoalStatus.active,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def goal_progress(db: Session, goal: CarbonGoal, today: Optional[date] = None) -> GoalProgress:
    current = carbon_between(db, goal.profile_id, goal.start_date, goal.end_date)
    return GoalProgress(
        goal=goal,
        current_amount=current,
        progress_percent=progress_percent(current, goal.target_amount),
        days_remaining=days_remaining(goal.end_date, today or _today()),
    )


def list_goals(
    db: Session,
    profile_id: int,
    status: Optional[str] = None,
    today: Optional[date] = None,
) -> list[GoalProgress]:
    get_profile(db, profile_id)
    q = db.query(CarbonGoal).filter(CarbonGoal.profile_id == profile_id)
    if status:
        q = q.filter(CarbonGoal.status == status)
    goals = q.order_by(CarbonGoal.created_at.desc(), CarbonGoal.id.desc()).all()
    return [goal_progress(db, g, today) for g in goals]


def update_goal_status(db: Session, profile_id: int, goal_id: int, status: str) -> CarbonGoal:
    goal = (
        db.query(CarbonGoal)
        .filter(CarbonGoal.id == goal_id, CarbonGoal.profile_id == profile_id)
        .first()
    )
    if goal is None:
        raise NotFoundError("CarbonGoal", goal_id)
    goal.status = status
    db.commit()
    db.refresh(goal)
    return goal
