"""
Activity router.

POST /profiles/{id}/activities   — log an activity (estimator + points + streak + badges)
GET  /profiles/{id}/activities   — list, newest first
GET  /profiles/{id}/summary      — totals, daily average and category shares for a window
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.models.activity import Activity, ActivityCategory
from tracegreen.schemas.activity import (
    ActivityCreate,
    ActivityListResponse,
    ActivityLogResponse,
    ActivityOut,
    CarbonSummaryResponse,
    CategoryShareOut,
    EarnedBadgeOut,
)
from tracegreen.schemas.common import ErrorResponse
from tracegreen.services.activities import list_activities, log_activity, window_summary
from tracegreen.services.aggregation import Window
from tracegreen.services.emissions import EmissionEstimator, get_estimator
from tracegreen.services.profiles import get_profile

router = APIRouter(prefix="/profiles/{profile_id}", tags=["activities"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    """Extract bare string value from a str-enum or plain str."""
    return v.value if hasattr(v, "value") else str(v)


def _activity_to_response(a: Activity) -> ActivityOut:
    return ActivityOut(
        id=a.id,
        profile_id=a.profile_id,
        category=_ev(a.category),
        activity_type=a.activity_type,
        quantity=a.quantity,
        unit=a.unit,
        carbon_value=a.carbon_value,
        note=a.note,
        day=a.day,
        created_at=a.created_at,
    )


# ---------------------------------------------------------------------------
# POST /profiles/{id}/activities
# ---------------------------------------------------------------------------

@router.post(
    "/activities",
    response_model=ActivityLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an activity",
    responses={
        403: {"model": ErrorResponse, "description": "Profile is banned."},
        404: {"model": ErrorResponse, "description": "Profile not found."},
        422: {
            "model": ErrorResponse,
            "description": (
                "`UNKNOWN_CATEGORY`, `UNKNOWN_ACTIVITY`, `INVALID_QUANTITY`, "
                "`FUTURE_DAY` or field validation."
            ),
        },
    },
)
def create_activity(
    profile_id: int,
    payload: ActivityCreate,
    db: Session = Depends(get_db),
    estimator: EmissionEstimator = Depends(get_estimator),
):
    """
    Compute `carbon_value = round(quantity * factor, 2)` and persist the record.

    Side effects on the profile, in the same transaction:
    - `total_points` += 10 and `current_level` recomputed
    - streak counter advanced / reset
    - any newly satisfied badge is awarded
    """
    result = log_activity(
        db,
        profile_id=profile_id,
        category=payload.category,
        activity_type=payload.activity_type,
        quantity=payload.quantity,
        note=payload.note,
        day=payload.day,
        estimator=estimator,
    )
    return ActivityLogResponse(
        activity=_activity_to_response(result.activity),
        points_awarded=result.points_awarded,
        badges_awarded=[
            EarnedBadgeOut(id=b.id, name=b.name, rarity=b.rarity)
            for b in result.badges_awarded
        ],
    )


# ---------------------------------------------------------------------------
# GET /profiles/{id}/activities
# ---------------------------------------------------------------------------

@router.get(
    "/activities",
    response_model=ActivityListResponse,
    summary="List logged activities (newest first)",
)
def read_activities(
    profile_id: int,
    category: Optional[ActivityCategory] = Query(default=None, description="Filter by category."),
    limit: int = Query(default=50, ge=1, le=200, description="Page size."),
    offset: int = Query(default=0, ge=0, description="Skip N items."),
    db: Session = Depends(get_db),
):
    total, items = list_activities(
        db,
        profile_id=profile_id,
        category=category.value if category else None,
        limit=limit,
        offset=offset,
    )
    return ActivityListResponse(
        total=total,
        items=[_activity_to_response(a) for a in items],
    )


# ---------------------------------------------------------------------------
# GET /profiles/{id}/summary
# ---------------------------------------------------------------------------

@router.get(
    "/summary",
    response_model=CarbonSummaryResponse,
    summary="Carbon totals and category shares for a window",
)
def read_summary(
    profile_id: int,
    window: Window = Query(default=Window.week, description="today | week | month"),
    reference_date: Optional[date] = Query(
        default=None,
        description="Last day (inclusive) of the window. Defaults to today (UTC).",
        examples=["2026-10-18"],
    ),
    db: Session = Depends(get_db),
):
    """
    Reduce the profile's activities inside the window:

    - `total` — sum of carbon values
    - `daily_average` — total / days in window
    - `shares` — per-category percentage of total; categories with no carbon are omitted
    """
    get_profile(db, profile_id)
    s = window_summary(db, profile_id, window, reference_date)
    return CarbonSummaryResponse(
        window=window.value,
        start=s.start,
        end=s.end,
        days=s.days,
        total=s.total,
        daily_average=s.daily_average,
        activity_count=s.activity_count,
        shares=[
            CategoryShareOut(category=c.category, total=c.total, percent=c.percent)
            for c in s.shares
        ],
    )
