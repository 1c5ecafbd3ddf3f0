"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from datetime import date
from decimal import Decimal

from tracegreen.core.errors import (
    DuplicateError,
    FutureDayError,
    InsufficientPointsError,
    InvalidInputError,
    InvalidPeriodError,
    InvalidQuantityError,
    NotFoundError,
    ProfileBannedError,
    RewardOutOfStockError,
    TraceGreenException,
    UnknownActivityError,
    UnknownCategoryError,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_unknown_category(self):
        err = UnknownCategoryError("water", known=["food"])
        assert err.http_status == 422
        assert err.code == "UNKNOWN_CATEGORY"
        assert "water" in err.message
        assert err.to_dict()["details"]["known_categories"] == ["food"]

    def test_unknown_activity(self):
        err = UnknownActivityError("transportation", "Teleporter")
        assert err.http_status == 422
        assert err.to_dict()["details"] == {
            "category": "transportation", "activity_type": "Teleporter",
        }

    def test_invalid_quantity_details_are_strings(self):
        err = InvalidQuantityError(Decimal("-1.5"))
        assert err.code == "INVALID_QUANTITY"
        assert err.details["quantity"] == "-1.5"

    def test_not_found(self):
        err = NotFoundError("Profile", 7)
        assert err.http_status == 404
        assert err.message == "Profile 7 not found."

    def test_duplicate(self):
        err = DuplicateError("Badge", "name", "First Step")
        assert err.http_status == 409
        assert err.code == "DUPLICATE"

    def test_banned_without_reason(self):
        err = ProfileBannedError(3)
        assert err.http_status == 403
        assert "reason" not in err.details

    def test_insufficient_points(self):
        err = InsufficientPointsError(available=5, required=50)
        assert err.http_status == 409
        assert "50" in err.message

    def test_future_day(self):
        err = FutureDayError(date(2023, 5, 2), today=date(2023, 5, 1))
        assert err.http_status == 422
        assert err.code == "FUTURE_DAY"
        assert err.details == {"day": "2023-05-02", "today": "2023-05-01"}

    def test_invalid_period(self):
        err = InvalidPeriodError(date(2023, 5, 2), date(2023, 5, 1))
        assert err.code == "INVALID_PERIOD"
        assert isinstance(err, InvalidInputError)

    def test_out_of_stock(self):
        err = RewardOutOfStockError(9)
        assert err.code == "REWARD_OUT_OF_STOCK"

    def test_to_dict_without_details(self):
        err = TraceGreenException("boom")
        d = err.to_dict()
        assert d == {"code": "INTERNAL_ERROR", "message": "boom"}


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestValidationErrors:
    def test_missing_fields(self, client, profile):
        r = client.post(f"/profiles/{profile['id']}/activities", json={})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = {e["field"] for e in body["details"]["errors"]}
        assert {"category", "activity_type", "quantity"} <= fields

    def test_blank_activity_type(self, client, profile):
        r = client.post(f"/profiles/{profile['id']}/activities", json={
            "category": "food", "activity_type": "   ", "quantity": 1,
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_non_numeric_quantity(self, client, profile):
        r = client.post(f"/profiles/{profile['id']}/activities", json={
            "category": "food", "activity_type": "Beef", "quantity": "lots",
        })
        assert r.status_code == 422

    def test_bad_reference_date(self, client, profile):
        r = client.get(f"/profiles/{profile['id']}/summary?reference_date=yesterday")
        assert r.status_code == 422
        errors = r.json()["details"]["errors"]
        assert errors[0]["field"] == "query.reference_date"


class TestErrorEnvelope:
    def test_not_found_envelope(self, client):
        r = client.get("/profiles/99999999/summary")
        assert r.status_code == 404
        body = r.json()
        assert set(body) == {"code", "message", "details"}
        assert body["details"] == {"resource": "Profile", "id": 99999999}

    def test_lookup_miss_is_never_zero(self, client):
        r = client.post("/factors/estimate", json={
            "category": "food", "activity_type": "Tofu", "quantity": 1,
        })
        assert r.status_code == 422
        assert "carbon_value" not in r.json()

    def test_error_envelope_documented(self, client):
        schema = client.get("/openapi.json").json()
        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/profiles/{profile_id}/activities"]["post"]["responses"]
        ref = responses["404"]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
