"""
Unit tests for the Emission Estimator.
No database required.
"""
from decimal import Decimal

import pytest

from tracegreen.core.errors import (
    InvalidInputError,
    InvalidQuantityError,
    UnknownActivityError,
    UnknownCategoryError,
)
from tracegreen.models.activity import ActivityCategory
from tracegreen.services.emissions import (
    CATEGORIES,
    EMISSION_FACTORS,
    EmissionEstimator,
    EmissionFactor,
    MAX_QUANTITY,
    estimate,
    get_factor,
    list_factors,
    to_quantity,
)


class TestFactorTable:
    def test_four_categories_in_order(self):
        assert CATEGORIES == ("transportation", "energy", "food", "waste")

    def test_table_size(self):
        assert len(list_factors()) == 26

    def test_category_sizes(self):
        assert len(list_factors("transportation")) == 8
        assert len(list_factors("energy")) == 5
        assert len(list_factors("food")) == 8
        assert len(list_factors("waste")) == 5

    def test_every_factor_is_positive(self):
        for f in list_factors():
            assert f.factor > 0

    def test_categories_match_model_enum(self):
        assert set(CATEGORIES) == {c.value for c in ActivityCategory}

    def test_get_factor_returns_unit(self):
        f = get_factor("energy", "Natural Gas")
        assert f.unit == "cubic meters"
        assert f.factor == Decimal("2.00")


class TestEstimate:
    def test_car_petrol(self):
        assert estimate("transportation", "Car (Petrol)", 100) == Decimal("21.00")

    def test_beef(self):
        assert estimate("food", "Beef", 2) == Decimal("54.00")

    def test_electricity(self):
        assert estimate("energy", "Electricity", 150) == Decimal("123.00")

    def test_electronic_waste_fractional(self):
        assert estimate("waste", "Electronic Waste", 0.5) == Decimal("150.00")

    def test_enum_category_accepted(self):
        assert estimate(ActivityCategory.food, "Rice", 1) == Decimal("2.70")

    def test_zero_quantity_is_zero(self):
        for f in list_factors():
            assert estimate(f.category, f.activity, 0) == Decimal("0.00")

    def test_result_has_two_decimals(self):
        assert estimate("transportation", "Bus", 1).as_tuple().exponent == -2

    def test_rounding_half_up(self):
        # 0.21 * 0.025 = 0.00525 -> 0.01
        assert estimate("transportation", "Car (Petrol)", "0.025") == Decimal("0.01")

    def test_linear_modulo_rounding(self):
        single = estimate("food", "Chicken", "1.3")
        tripled = estimate("food", "Chicken", "3.9")
        assert abs(tripled - single * 3) <= Decimal("0.02")

    def test_string_quantity(self):
        assert estimate("transportation", "Train", "250") == Decimal("10.00")


class TestInvalidInput:
    def test_unknown_activity(self):
        with pytest.raises(UnknownActivityError) as exc_info:
            estimate("transportation", "Teleporter", 10)
        assert exc_info.value.code == "UNKNOWN_ACTIVITY"
        assert exc_info.value.http_status == 422

    def test_unknown_activity_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            estimate("transportation", "Teleporter", 10)

    def test_activity_from_other_category(self):
        with pytest.raises(UnknownActivityError):
            estimate("food", "Electricity", 1)

    def test_activity_name_is_case_sensitive(self):
        with pytest.raises(UnknownActivityError):
            estimate("food", "beef", 1)

    def test_unknown_category(self):
        with pytest.raises(UnknownCategoryError) as exc_info:
            estimate("water", "Shower", 1)
        assert exc_info.value.details["known_categories"] == list(CATEGORIES)

    def test_list_unknown_category(self):
        with pytest.raises(UnknownCategoryError):
            list_factors("water")

    def test_negative_quantity(self):
        with pytest.raises(InvalidQuantityError):
            estimate("food", "Beef", -1)

    @pytest.mark.parametrize("bad", ["abc", "NaN", "Infinity", None, True])
    def test_unusable_quantity(self, bad):
        with pytest.raises(InvalidQuantityError):
            to_quantity(bad)

    @pytest.mark.parametrize("bad", ["0.0004", "1.2345", "100000000000"])
    def test_quantity_outside_storage_rejected(self, bad):
        with pytest.raises(InvalidQuantityError):
            estimate("waste", "Electronic Waste", bad)

    def test_storage_bounds_accepted(self):
        assert to_quantity("0.001") == Decimal("0.001")
        assert to_quantity("1.2000") == Decimal("1.2")
        assert to_quantity(MAX_QUANTITY) == MAX_QUANTITY


class TestCustomTable:
    def test_estimator_over_custom_table(self):
        table = {
            "energy": {
                "Solar": EmissionFactor("energy", "Solar", "kWh", Decimal("0.05")),
            },
        }
        est = EmissionEstimator(table)
        assert est.categories == ["energy"]
        assert est.estimate("energy", "Solar", 10) == Decimal("0.50")
        with pytest.raises(UnknownCategoryError):
            est.estimate("food", "Beef", 1)

    def test_default_table_is_untouched(self):
        assert "Solar" not in EMISSION_FACTORS["energy"]
