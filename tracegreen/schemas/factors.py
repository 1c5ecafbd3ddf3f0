"""
Emission factor schemas.

GET  /factors              → FactorListResponse
GET  /factors/{category}   → FactorListResponse
POST /factors/estimate     → EstimateRequest → EstimateResponse
"""
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from tracegreen.schemas.common import NonEmptyStr
from tracegreen.services.emissions import MAX_QUANTITY


class FactorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    activity: str
    unit: str
    factor: Decimal = Field(description="kg CO2e per unit.")


class FactorListResponse(BaseModel):
    total: int
    items: list[FactorOut]


class EstimateRequest(BaseModel):
    category: NonEmptyStr = Field(examples=["transportation"])
    activity_type: NonEmptyStr = Field(examples=["Car (Petrol)"])
    quantity: Decimal = Field(
        le=MAX_QUANTITY,
        description="Amount in the activity's unit. Non-negative, up to 3 decimals.",
        examples=[100],
    )


class EstimateResponse(BaseModel):
    category: str
    activity_type: str
    quantity: Decimal
    unit: str
    factor: Decimal
    carbon_value: Decimal = Field(description="kg CO2e, rounded to 2 decimals.")
