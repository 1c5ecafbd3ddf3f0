"""
Custom exception hierarchy for Trace Green.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class TraceGreenException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInputError(TraceGreenException):
    """Rejected estimator input. Never silently computed as zero."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_INPUT"


class UnknownCategoryError(InvalidInputError):
    code = "UNKNOWN_CATEGORY"

    def __init__(self, category: str, known: list[str]):
        super().__init__(
            message=f"Unknown activity category '{category}'.",
            details={"category": category, "known_categories": known},
        )


class UnknownActivityError(InvalidInputError):
    code = "UNKNOWN_ACTIVITY"

    def __init__(self, category: str, activity_type: str):
        super().__init__(
            message=f"Activity '{activity_type}' is not listed under '{category}'.",
            details={"category": category, "activity_type": activity_type},
        )


class InvalidQuantityError(InvalidInputError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity: Any):
        super().__init__(
            message=(
                "Quantity must be a finite, non-negative number "
                "with at most 3 decimals and below 10^11."
            ),
            details={"quantity": str(quantity)},
        )


class FutureDayError(InvalidInputError):
    code = "FUTURE_DAY"

    def __init__(self, day: date, today: date):
        super().__init__(
            message=f"Activity day {day.isoformat()} is after today ({today.isoformat()}).",
            details={"day": day.isoformat(), "today": today.isoformat()},
        )


class InvalidPeriodError(InvalidInputError):
    code = "INVALID_PERIOD"

    def __init__(self, start: date, end: date):
        super().__init__(
            message="end_date must be on or after start_date.",
            details={"start_date": start.isoformat(), "end_date": end.isoformat()},
        )


class NotFoundError(TraceGreenException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource} {resource_id} not found.",
            details={"resource": resource, "id": resource_id},
        )


class DuplicateError(TraceGreenException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE"

    def __init__(self, resource: str, field: str, value: Any):
        super().__init__(
            message=f"{resource} with {field}={value!r} already exists.",
            details={"resource": resource, "field": field, "value": value},
        )


class ProfileBannedError(TraceGreenException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "PROFILE_BANNED"

    def __init__(self, profile_id: int, reason: str | None = None):
        details: dict[str, Any] = {"profile_id": profile_id}
        if reason:
            details["reason"] = reason
        super().__init__(message=f"Profile {profile_id} is banned.", details=details)


class InsufficientPointsError(TraceGreenException):
    http_status = status.HTTP_409_CONFLICT
    code = "INSUFFICIENT_POINTS"

    def __init__(self, available: int, required: int):
        super().__init__(
            message=f"Reward costs {required} points but only {available} are available.",
            details={"available": available, "required": required},
        )


class RewardOutOfStockError(TraceGreenException):
    http_status = status.HTTP_409_CONFLICT
    code = "REWARD_OUT_OF_STOCK"

    def __init__(self, reward_id: int):
        super().__init__(
            message=f"Reward {reward_id} is out of stock.",
            details={"reward_id": reward_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def tracegreen_exception_handler(
    request: Request, exc: TraceGreenException
) -> JSONResponse:
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
