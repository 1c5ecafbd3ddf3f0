from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RewardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    category: str
    points_cost: int
    stock_quantity: Optional[int] = Field(default=None, description="null = unlimited")
    partner_name: Optional[str] = None
    terms_conditions: Optional[str] = None
    expiry_days: int
    is_active: bool


class RewardListResponse(BaseModel):
    total: int
    items: list[RewardOut]


class RedemptionRequest(BaseModel):
    reward_id: int = Field(gt=0)


class RedemptionOut(BaseModel):
    id: int
    reward_id: int
    reward_title: str
    points_spent: int
    redemption_code: str
    status: str
    expires_at: datetime
    created_at: Optional[datetime] = None


class RedemptionListResponse(BaseModel):
    total: int
    items: list[RedemptionOut]
