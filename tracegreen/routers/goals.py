"""
Goals router.

POST  /profiles/{id}/goals               — create a carbon goal
GET   /profiles/{id}/goals               — list with derived progress
PATCH /profiles/{id}/goals/{goal_id}     — change status
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.models.goal import GoalStatus
from tracegreen.schemas.common import ErrorResponse
from tracegreen.schemas.goal import GoalCreate, GoalListResponse, GoalOut, GoalStatusUpdate
from tracegreen.services.goals import (
    GoalProgress,
    create_goal,
    goal_progress,
    list_goals,
    update_goal_status,
)

router = APIRouter(prefix="/profiles/{profile_id}/goals", tags=["goals"])


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _progress_to_response(gp: GoalProgress) -> GoalOut:
    g = gp.goal
    return GoalOut(
        id=g.id,
        profile_id=g.profile_id,
        goal_type=_ev(g.goal_type),
        target_amount=g.target_amount,
        start_date=g.start_date,
        end_date=g.end_date,
        status=_ev(g.status),
        current_amount=gp.current_amount,
        progress_percent=gp.progress_percent,
        days_remaining=gp.days_remaining,
    )


@router.post(
    "",
    response_model=GoalOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a carbon goal",
)
def create(profile_id: int, payload: GoalCreate, db: Session = Depends(get_db)):
    goal = create_goal(
        db,
        profile_id=profile_id,
        goal_type=payload.goal_type,
        target_amount=payload.target_amount,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return _progress_to_response(goal_progress(db, goal))


@router.get(
    "",
    response_model=GoalListResponse,
    summary="List goals with progress",
)
def read_all(
    profile_id: int,
    goal_status: Optional[GoalStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
):
    """
    `current_amount` is the profile's carbon logged between start_date and
    end_date; `progress_percent = min(current / target * 100, 100)`.
    """
    items = list_goals(db, profile_id, status=goal_status.value if goal_status else None)
    return GoalListResponse(
        total=len(items),
        items=[_progress_to_response(gp) for gp in items],
    )


@router.patch(
    "/{goal_id}",
    response_model=GoalOut,
    summary="Update goal status",
    responses={
        404: {"model": ErrorResponse, "description": "Goal not found for this profile."},
    },
)
def update_status(
    profile_id: int,
    goal_id: int,
    payload: GoalStatusUpdate,
    db: Session = Depends(get_db),
):
    goal = update_goal_status(db, profile_id, goal_id, payload.status)
    return _progress_to_response(goal_progress(db, goal))
