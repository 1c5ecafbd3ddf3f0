"""
Shared schema primitives used across the API.
"""
from typing import Annotated, Any, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, StringConstraints


# Required text field: surrounding whitespace stripped, must not be empty after.
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


ItemT = TypeVar("ItemT")


class Page(BaseModel, Generic[ItemT]):
    """Paginated list envelope: total row count plus the requested slice."""
    total: int
    items: list[ItemT]
