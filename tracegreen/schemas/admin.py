"""
Admin CRUD schemas.

Create schemas carry the required fields; Update schemas make every field
optional and are applied with `model_dump(exclude_unset=True)`.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracegreen.schemas.common import NonEmptyStr
from tracegreen.services.badge_engine import CriteriaType


# ---------------------------------------------------------------------------
# Challenges
# ---------------------------------------------------------------------------

class ChallengeCreate(BaseModel):
    title: NonEmptyStr
    description: NonEmptyStr
    challenge_type: NonEmptyStr = "carbon_reduction"
    difficulty: NonEmptyStr = "beginner"
    target_value: Decimal = Field(default=Decimal("50"), ge=0)
    target_unit: NonEmptyStr = "kg CO2"
    points_reward: int = Field(default=100, ge=0)
    start_date: date
    end_date: date
    is_active: bool = True

    @model_validator(mode="after")
    def check_period(self) -> "ChallengeCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ChallengeUpdate(BaseModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    challenge_type: Optional[NonEmptyStr] = None
    difficulty: Optional[NonEmptyStr] = None
    target_value: Optional[Decimal] = Field(default=None, ge=0)
    target_unit: Optional[NonEmptyStr] = None
    points_reward: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None


class ChallengeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    challenge_type: str
    difficulty: str
    target_value: Decimal
    target_unit: str
    points_reward: int
    start_date: date
    end_date: date
    is_active: bool
    current_participants: int = 0
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------

class BadgeCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: NonEmptyStr
    description: NonEmptyStr
    icon: NonEmptyStr = "award"
    color: NonEmptyStr = "#3B82F6"
    category: NonEmptyStr = "achievement"
    criteria_type: CriteriaType
    criteria_value: Decimal = Field(ge=0)
    rarity: NonEmptyStr = "common"
    is_active: bool = True


class BadgeUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    icon: Optional[NonEmptyStr] = None
    color: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    criteria_type: Optional[CriteriaType] = None
    criteria_value: Optional[Decimal] = Field(default=None, ge=0)
    rarity: Optional[NonEmptyStr] = None
    is_active: Optional[bool] = None


class BadgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    icon: str
    color: str
    category: str
    criteria_type: str
    criteria_value: Decimal
    rarity: str
    is_active: bool
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Rewards
# ---------------------------------------------------------------------------

class RewardCreate(BaseModel):
    title: NonEmptyStr
    description: NonEmptyStr
    category: NonEmptyStr = "general"
    points_cost: int = Field(gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0, description="null = unlimited")
    partner_name: Optional[str] = None
    terms_conditions: Optional[str] = None
    expiry_days: int = Field(default=30, gt=0)
    is_active: bool = True


class RewardUpdate(BaseModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    points_cost: Optional[int] = Field(default=None, gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    partner_name: Optional[str] = None
    terms_conditions: Optional[str] = None
    expiry_days: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None


# RewardOut lives in schemas/reward.py; the admin view reuses it.


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------

class ContentCreate(BaseModel):
    title: NonEmptyStr
    body: NonEmptyStr
    category: NonEmptyStr = "general"
    difficulty: NonEmptyStr = "beginner"
    estimated_read_time: Optional[int] = Field(default=None, gt=0, description="Minutes.")
    tags: list[NonEmptyStr] = Field(default_factory=list)
    is_featured: bool = False
    is_published: bool = False


class ContentUpdate(BaseModel):
    title: Optional[NonEmptyStr] = None
    body: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    difficulty: Optional[NonEmptyStr] = None
    estimated_read_time: Optional[int] = Field(default=None, gt=0)
    tags: Optional[list[NonEmptyStr]] = None
    is_featured: Optional[bool] = None
    is_published: Optional[bool] = None


class ContentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    body: str
    category: str
    difficulty: str
    estimated_read_time: Optional[int] = None
    tags: list[str]
    is_featured: bool
    is_published: bool
    created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------

class CommunityCreate(BaseModel):
    name: NonEmptyStr
    description: NonEmptyStr
    category: NonEmptyStr = "general"
    is_public: bool = True
    creator_id: Optional[int] = None


class CommunityUpdate(BaseModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    is_public: Optional[bool] = None


class CommunityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    is_public: bool
    creator_id: Optional[int] = None
    created_at: Optional[datetime] = None


class CommunityMemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: int
    profile_id: int
    role: str
    joined_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class BanRequest(BaseModel):
    reason: NonEmptyStr


class AdminFlagRequest(BaseModel):
    is_admin: bool


class AdminStatsResponse(BaseModel):
    profiles: int
    banned_profiles: int
    activities: int
    challenges: int
    badges: int
    badges_awarded: int
    rewards: int
    redemptions: int
    content: int
    communities: int
    challenge_participants: int
    community_members: int
