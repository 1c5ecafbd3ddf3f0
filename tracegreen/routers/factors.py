"""
Emission factor router.

GET  /factors               — full factor table
GET  /factors/{category}    — one category's sub-table
POST /factors/estimate      — preview a carbon value without logging it
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from tracegreen.schemas.common import ErrorResponse
from tracegreen.schemas.factors import (
    EstimateRequest,
    EstimateResponse,
    FactorListResponse,
    FactorOut,
)
from tracegreen.services.emissions import EmissionEstimator, EmissionFactor, get_estimator

router = APIRouter(prefix="/factors", tags=["factors"])


def _factor_to_response(f: EmissionFactor) -> FactorOut:
    return FactorOut(category=f.category, activity=f.activity, unit=f.unit, factor=f.factor)


@router.get(
    "",
    response_model=FactorListResponse,
    summary="List every emission factor",
)
def list_all_factors(estimator: EmissionEstimator = Depends(get_estimator)):
    """Return the static factor table (kg CO2e per unit), grouped by category order."""
    factors = estimator.list_factors()
    return FactorListResponse(
        total=len(factors),
        items=[_factor_to_response(f) for f in factors],
    )


@router.get(
    "/{category}",
    response_model=FactorListResponse,
    summary="List the emission factors of one category",
    responses={
        422: {"model": ErrorResponse, "description": "Unknown category (`UNKNOWN_CATEGORY`)."},
    },
)
def list_category_factors(
    category: str,
    estimator: EmissionEstimator = Depends(get_estimator),
):
    factors = estimator.list_factors(category)
    return FactorListResponse(
        total=len(factors),
        items=[_factor_to_response(f) for f in factors],
    )


@router.post(
    "/estimate",
    response_model=EstimateResponse,
    summary="Estimate kg CO2e for an activity (no persistence)",
    responses={
        422: {
            "model": ErrorResponse,
            "description": (
                "`UNKNOWN_CATEGORY`, `UNKNOWN_ACTIVITY` or `INVALID_QUANTITY`. "
                "A lookup miss is never reported as 0."
            )
        },
    },
)
def estimate_carbon(
    payload: EstimateRequest,
    estimator: EmissionEstimator = Depends(get_estimator),
):
    """
    Compute `round(quantity * factor, 2)` using the static factor table.

    Same computation that `POST /profiles/{id}/activities` persists.
    """
    factor = estimator.get_factor(payload.category, payload.activity_type)
    carbon = estimator.estimate(payload.category, payload.activity_type, payload.quantity)
    return EstimateResponse(
        category=factor.category,
        activity_type=factor.activity,
        quantity=payload.quantity,
        unit=factor.unit,
        factor=factor.factor,
        carbon_value=carbon,
    )
