"""
Activity schemas.

POST /profiles/{id}/activities  → ActivityCreate → ActivityLogResponse
GET  /profiles/{id}/activities  → ActivityListResponse
GET  /profiles/{id}/summary     → CarbonSummaryResponse
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from tracegreen.schemas.common import NonEmptyStr
from tracegreen.services.emissions import MAX_QUANTITY


class ActivityCreate(BaseModel):
    """One activity to log. The server computes the carbon value."""

    category: NonEmptyStr = Field(
        description="transportation | energy | food | waste",
        examples=["transportation"],
    )
    activity_type: NonEmptyStr = Field(examples=["Car (Petrol)"])
    quantity: Decimal = Field(
        le=MAX_QUANTITY,
        description="Amount in the activity's unit (km, kWh, kg, ...), up to 3 decimals.",
        examples=[12.5],
    )
    note: Annotated[Optional[str], Field(default=None, max_length=2_000)] = None
    day: Optional[date] = Field(
        default=None,
        description="ISO date of the activity, not after today (UTC). Defaults to today.",
        examples=["2026-10-18"],
    )


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    profile_id: int
    category: str
    activity_type: str
    quantity: Decimal
    unit: str
    carbon_value: Decimal
    note: Optional[str] = None
    day: date
    created_at: Optional[datetime] = None


class EarnedBadgeOut(BaseModel):
    id: int
    name: str
    rarity: str


class ActivityLogResponse(BaseModel):
    activity: ActivityOut
    points_awarded: int
    badges_awarded: list[EarnedBadgeOut]


class ActivityListResponse(BaseModel):
    total: int
    items: list[ActivityOut]


class CategoryShareOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    total: Decimal
    percent: Decimal = Field(description="Share of the window total, 0–100.")


class CarbonSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    window: str
    start: date
    end: date
    days: int
    total: Decimal
    daily_average: Decimal
    activity_count: int
    shares: list[CategoryShareOut] = Field(
        description="Per-category share; categories with no carbon are omitted."
    )
