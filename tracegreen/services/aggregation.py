"""
Aggregation views — reductions over activity records for the dashboard.

Date filtering is done by the query (see services/activities.py); every
function here takes records that are already inside the window. A record is
anything with `.category` and `.carbon_value` attributes.

Rules
-----
  total          = sum(carbon_value)                  (order-independent)
  category share = category_total / total * 100       (2 decimals)
  daily average  = total / days_in_window             (2 decimals)

Categories with zero carbon in the window are omitted from the shares, so
over a non-empty window the shares sum to 100 within rounding.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from tracegreen.services.emissions import CATEGORIES


class Window(str, enum.Enum):
    today = "today"
    week = "week"
    month = "month"


WINDOW_DAYS: dict[Window, int] = {
    Window.today: 1,
    Window.week: 7,
    Window.month: 30,
}

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class CategoryShare:
    category: str
    total: Decimal
    percent: Decimal


@dataclass
class CarbonSummary:
    start: date
    end: date
    days: int
    total: Decimal
    daily_average: Decimal
    activity_count: int
    shares: list[CategoryShare]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _dec(v) -> Decimal:
    return v if isinstance(v, Decimal) else Decimal(str(v))


def window_bounds(window: Window, reference_date: date) -> tuple[date, date]:
    """Inclusive [start, end] of the `window` ending on reference_date."""
    days = WINDOW_DAYS[Window(window)]
    return reference_date - timedelta(days=days - 1), reference_date


# ---------------------------------------------------------------------------
# Reductions
# ---------------------------------------------------------------------------

def total_carbon(records: Iterable) -> Decimal:
    return sum((_dec(r.carbon_value) for r in records), Decimal("0"))


def category_totals(records: Iterable) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for r in records:
        key = _ev(r.category)
        totals[key] = totals.get(key, Decimal("0")) + _dec(r.carbon_value)
    return totals


def category_shares(records: Iterable) -> list[CategoryShare]:
    totals = category_totals(records)
    grand = sum(totals.values(), Decimal("0"))
    if grand == 0:
        return []

    # Known categories first in table order, anything else after
    ordered = [c for c in CATEGORIES if c in totals]
    ordered += sorted(c for c in totals if c not in CATEGORIES)

    shares = []
    for category in ordered:
        amount = totals[category]
        if amount == 0:
            continue
        percent = (amount / grand * _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)
        shares.append(CategoryShare(category=category, total=amount, percent=percent))
    return shares


def daily_average(total: Decimal, days: int) -> Decimal:
    if days <= 0:
        raise ValueError("days must be positive")
    return (_dec(total) / Decimal(days)).quantize(_CENT, rounding=ROUND_HALF_UP)


def summarize(records: Iterable, start: date, end: date) -> CarbonSummary:
    """Build the full summary for records already filtered to [start, end]."""
    rows = list(records)
    days = (end - start).days + 1
    total = total_carbon(rows)
    return CarbonSummary(
        start=start,
        end=end,
        days=days,
        total=total,
        daily_average=daily_average(total, days),
        activity_count=len(rows),
        shares=category_shares(rows),
    )
