"""
Profile router.

POST  /profiles                    — create a profile
GET   /profiles/{id}               — read
PATCH /profiles/{id}               — update name / location / monthly goal
GET   /profiles/{id}/dashboard     — every dashboard widget in one read
GET   /profiles/{id}/badges        — earned badges, newest first
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.models.profile import Profile
from tracegreen.schemas.activity import CategoryShareOut
from tracegreen.schemas.common import ErrorResponse
from tracegreen.schemas.profile import (
    DashboardResponse,
    ProfileBadgeOut,
    ProfileCreate,
    ProfileOut,
    ProfileUpdate,
)
from tracegreen.services.badge_engine import get_profile_badges
from tracegreen.services.dashboard import build_dashboard
from tracegreen.services.profiles import create_profile, get_profile, update_profile

router = APIRouter(prefix="/profiles", tags=["profiles"])


def profile_to_response(p: Profile) -> ProfileOut:
    return ProfileOut.model_validate(p)


@router.post(
    "",
    response_model=ProfileOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile",
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered (`DUPLICATE`)."},
    },
)
def create(payload: ProfileCreate, db: Session = Depends(get_db)):
    profile = create_profile(
        db,
        email=payload.email,
        full_name=payload.full_name,
        location=payload.location,
        carbon_goal_monthly=payload.carbon_goal_monthly,
    )
    return profile_to_response(profile)


@router.get(
    "/{profile_id}",
    response_model=ProfileOut,
    summary="Read a profile",
    responses={
        404: {"model": ErrorResponse, "description": "Profile not found."},
    },
)
def read(profile_id: int, db: Session = Depends(get_db)):
    return profile_to_response(get_profile(db, profile_id))


@router.patch(
    "/{profile_id}",
    response_model=ProfileOut,
    summary="Update profile settings",
)
def update(profile_id: int, payload: ProfileUpdate, db: Session = Depends(get_db)):
    profile = get_profile(db, profile_id)
    changes = payload.model_dump(exclude_unset=True)
    # carbon_goal_monthly is NOT NULL; an explicit null means "leave as is"
    if changes.get("carbon_goal_monthly") is None:
        changes.pop("carbon_goal_monthly", None)
    return profile_to_response(update_profile(db, profile, changes))


@router.get(
    "/{profile_id}/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard stats: carbon totals, goal progress, points, streak",
)
def dashboard(
    profile_id: int,
    reference_date: Optional[date] = Query(
        default=None,
        description="Last day (inclusive) of every window. Defaults to today (UTC).",
        examples=["2026-10-18"],
    ),
    db: Session = Depends(get_db),
):
    """
    ### Windows (all inclusive, ending on reference_date)
    | Field | Window |
    |---|---|
    | `today_carbon` | 1 day |
    | `week_carbon`  | 7 days |
    | `month_carbon` | 30 days |

    `monthly_goal_progress` is `month_carbon / monthly_goal * 100`, capped at 100.
    """
    stats = build_dashboard(db, profile_id, reference_date)
    return DashboardResponse(
        reference_date=stats.reference_date,
        today_carbon=stats.today_carbon,
        week_carbon=stats.week_carbon,
        month_carbon=stats.month_carbon,
        monthly_goal=stats.monthly_goal,
        monthly_goal_progress=stats.monthly_goal_progress,
        today_completed=stats.today_completed,
        total_points=stats.total_points,
        level=stats.level,
        current_streak=stats.current_streak,
        longest_streak=stats.longest_streak,
        next_milestone=stats.next_milestone,
        days_to_next_milestone=stats.days_to_next_milestone,
        activities_count=stats.activities_count,
        badges_count=stats.badges_count,
        month_shares=[
            CategoryShareOut(category=s.category, total=s.total, percent=s.percent)
            for s in stats.month_shares
        ],
    )


@router.get(
    "/{profile_id}/badges",
    response_model=list[ProfileBadgeOut],
    summary="Badges earned by a profile",
)
def badges(profile_id: int, db: Session = Depends(get_db)):
    get_profile(db, profile_id)
    return [
        ProfileBadgeOut(
            badge_id=badge.id,
            name=badge.name,
            description=badge.description,
            icon=badge.icon,
            color=badge.color,
            rarity=badge.rarity,
            earned_at=pb.earned_at,
        )
        for pb, badge in get_profile_badges(db, profile_id)
    ]
