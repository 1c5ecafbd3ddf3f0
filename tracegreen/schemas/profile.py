from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tracegreen.schemas.activity import CategoryShareOut
from tracegreen.schemas.common import NonEmptyStr


class ProfileCreate(BaseModel):
    email: EmailStr
    full_name: Optional[NonEmptyStr] = None
    location: Optional[NonEmptyStr] = None
    carbon_goal_monthly: Optional[Decimal] = Field(default=None, gt=0)


class ProfileUpdate(BaseModel):
    full_name: Optional[NonEmptyStr] = None
    location: Optional[NonEmptyStr] = None
    carbon_goal_monthly: Optional[Decimal] = Field(default=None, gt=0)


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: Optional[str] = None
    location: Optional[str] = None
    total_points: int
    current_level: int
    current_streak: int
    longest_streak: int
    last_active_day: Optional[date] = None
    carbon_goal_monthly: Decimal
    is_admin: bool
    is_banned: bool
    ban_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfileListResponse(BaseModel):
    total: int
    items: list[ProfileOut]


class ProfileBadgeOut(BaseModel):
    badge_id: int
    name: str
    description: str
    icon: str
    color: str
    rarity: str
    earned_at: Optional[datetime] = None


class LeaderboardEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    profile_id: int
    full_name: Optional[str] = None
    total_points: int
    current_level: int
    current_streak: int


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reference_date: date
    today_carbon: Decimal
    week_carbon: Decimal
    month_carbon: Decimal
    monthly_goal: Decimal
    monthly_goal_progress: Decimal = Field(description="0–100, capped.")
    today_completed: bool
    total_points: int
    level: int
    current_streak: int
    longest_streak: int
    next_milestone: Optional[str] = Field(default=None, description='"week" | "month"')
    days_to_next_milestone: Optional[int] = None
    activities_count: int
    badges_count: int
    month_shares: list[CategoryShareOut]
