"""
Emission Estimator — converts a logged quantity into kg CO2e.

Contract
--------
  estimate(category, activity_type, quantity) = round(quantity * factor, 2)

The factor table below is static configuration: factors are pre-baked per
declared unit (kg CO2e/km, kg CO2e/kWh, kg CO2e/kg, ...), so there is no
unit conversion. A lookup miss raises; it never yields 0.

Public API
----------
EmissionEstimator(table)                   -> estimator over any table
default_estimator                          -> estimator over EMISSION_FACTORS
estimate(category, activity_type, qty)     -> Decimal
get_factor(category, activity_type)        -> EmissionFactor
list_factors(category=None)                -> list[EmissionFactor]
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Mapping, Optional

from tracegreen.core.errors import (
    InvalidQuantityError,
    UnknownActivityError,
    UnknownCategoryError,
)


@dataclass(frozen=True)
class EmissionFactor:
    category: str
    activity: str
    unit: str
    factor: Decimal   # kg CO2e per unit


# (activity, unit, kg CO2e per unit)
_RAW_TABLE: dict[str, tuple[tuple[str, str, str], ...]] = {
    "transportation": (
        ("Car (Petrol)",           "km", "0.21"),
        ("Car (Diesel)",           "km", "0.26"),
        ("Motorcycle",             "km", "0.11"),
        ("Bus",                    "km", "0.08"),
        ("Train",                  "km", "0.04"),
        ("Flight (Domestic)",      "km", "0.25"),
        ("Flight (International)", "km", "0.30"),
        ("Auto Rickshaw",          "km", "0.15"),
    ),
    "energy": (
        ("Electricity",      "kWh",          "0.82"),
        ("Natural Gas",      "cubic meters", "2.00"),
        ("LPG",              "kg",           "3.00"),
        ("Coal",             "kg",           "2.40"),
        ("Diesel Generator", "liters",       "2.70"),
    ),
    "food": (
        ("Beef",           "kg",     "27.00"),
        ("Chicken",        "kg",     "6.90"),
        ("Fish",           "kg",     "6.10"),
        ("Pork",           "kg",     "12.10"),
        ("Dairy Products", "liters", "3.20"),
        ("Rice",           "kg",     "2.70"),
        ("Vegetables",     "kg",     "2.00"),
        ("Fruits",         "kg",     "1.10"),
    ),
    "waste": (
        ("General Waste",    "kg", "0.50"),
        ("Plastic Waste",    "kg", "6.00"),
        ("Paper Waste",      "kg", "3.30"),
        ("Food Waste",       "kg", "3.80"),
        ("Electronic Waste", "kg", "300.00"),
    ),
}

EMISSION_FACTORS: dict[str, dict[str, EmissionFactor]] = {
    category: {
        name: EmissionFactor(category=category, activity=name, unit=unit, factor=Decimal(f))
        for name, unit, f in rows
    }
    for category, rows in _RAW_TABLE.items()
}

CATEGORIES: tuple[str, ...] = tuple(EMISSION_FACTORS)

_CENT = Decimal("0.01")

# Storage scale of carbon_activities.quantity, Numeric(14, 3).
QUANTITY_STEP = Decimal("0.001")
MAX_QUANTITY = Decimal("99999999999.999")


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def to_quantity(value) -> Decimal:
    """Coerce `value` to a storable quantity or raise InvalidQuantityError.

    A storable quantity is finite, non-negative, at most MAX_QUANTITY and has
    no more than three decimals, so the stored row reproduces its carbon value.
    """
    if isinstance(value, bool):
        raise InvalidQuantityError(value)
    try:
        q = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidQuantityError(value)
    if not q.is_finite() or q < 0 or q > MAX_QUANTITY:
        raise InvalidQuantityError(value)
    if q != q.quantize(QUANTITY_STEP):
        raise InvalidQuantityError(value)
    return q


class EmissionEstimator:
    """Stateless estimator bound to one factor table."""

    def __init__(self, table: Mapping[str, Mapping[str, EmissionFactor]]):
        self._table = table

    @property
    def categories(self) -> list[str]:
        return list(self._table)

    def get_factor(self, category, activity_type: str) -> EmissionFactor:
        key = _ev(category)
        sub_table = self._table.get(key)
        if sub_table is None:
            raise UnknownCategoryError(key, known=self.categories)
        factor = sub_table.get(activity_type)
        if factor is None:
            raise UnknownActivityError(key, activity_type)
        return factor

    def list_factors(self, category: Optional[str] = None) -> list[EmissionFactor]:
        if category is None:
            return [f for sub in self._table.values() for f in sub.values()]
        key = _ev(category)
        if key not in self._table:
            raise UnknownCategoryError(key, known=self.categories)
        return list(self._table[key].values())

    def estimate(self, category, activity_type: str, quantity) -> Decimal:
        factor = self.get_factor(category, activity_type)
        q = to_quantity(quantity)
        return (q * factor.factor).quantize(_CENT, rounding=ROUND_HALF_UP)


default_estimator = EmissionEstimator(EMISSION_FACTORS)


def get_estimator() -> EmissionEstimator:
    """FastAPI dependency; override in tests to swap the table."""
    return default_estimator


def estimate(category, activity_type: str, quantity) -> Decimal:
    return default_estimator.estimate(category, activity_type, quantity)


def get_factor(category, activity_type: str) -> EmissionFactor:
    return default_estimator.get_factor(category, activity_type)


def list_factors(category: Optional[str] = None) -> list[EmissionFactor]:
    return default_estimator.list_factors(category)
