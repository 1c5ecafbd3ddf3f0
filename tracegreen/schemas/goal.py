from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracegreen.models.goal import GoalStatus, GoalType


class GoalCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    goal_type: GoalType
    target_amount: Decimal = Field(gt=0, description="kg CO2e for the goal period.")
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_period(self) -> "GoalCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class GoalStatusUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: GoalStatus


class GoalOut(BaseModel):
    id: int
    profile_id: int
    goal_type: str
    target_amount: Decimal
    start_date: date
    end_date: date
    status: str
    current_amount: Decimal
    progress_percent: Decimal = Field(description="0–100, capped at 100.")
    days_remaining: int


class GoalListResponse(BaseModel):
    total: int
    items: list[GoalOut]
