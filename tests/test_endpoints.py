"""
Integration tests for API endpoints using a SQLite DB.
"""
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from tracegreen.models.profile import Profile


def _log(client, profile_id, category, activity_type, quantity, day=None, note=None):
    body = {"category": category, "activity_type": activity_type, "quantity": quantity}
    if day:
        body["day"] = day
    if note:
        body["note"] = note
    return client.post(f"/profiles/{profile_id}/activities", json=body)


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["db"] == "ok"


class TestFactors:
    def test_list_all(self, client):
        r = client.get("/factors")
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 26
        first = body["items"][0]
        assert first["category"] == "transportation"
        assert first["activity"] == "Car (Petrol)"
        assert first["unit"] == "km"
        assert Decimal(first["factor"]) == Decimal("0.21")

    def test_list_category(self, client):
        r = client.get("/factors/waste")
        assert r.status_code == 200
        assert r.json()["total"] == 5
        assert {i["category"] for i in r.json()["items"]} == {"waste"}

    def test_list_unknown_category(self, client):
        r = client.get("/factors/water")
        assert r.status_code == 422
        assert r.json()["code"] == "UNKNOWN_CATEGORY"

    def test_estimate(self, client):
        r = client.post("/factors/estimate", json={
            "category": "energy", "activity_type": "Electricity", "quantity": 150,
        })
        assert r.status_code == 200
        body = r.json()
        assert Decimal(body["carbon_value"]) == Decimal("123.00")
        assert body["unit"] == "kWh"

    def test_estimate_fractional(self, client):
        r = client.post("/factors/estimate", json={
            "category": "waste", "activity_type": "Electronic Waste", "quantity": 0.5,
        })
        assert Decimal(r.json()["carbon_value"]) == Decimal("150.00")

    def test_estimate_unknown_activity(self, client):
        r = client.post("/factors/estimate", json={
            "category": "transportation", "activity_type": "Teleporter", "quantity": 10,
        })
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "UNKNOWN_ACTIVITY"
        assert body["details"]["activity_type"] == "Teleporter"

    def test_estimate_negative_quantity(self, client):
        r = client.post("/factors/estimate", json={
            "category": "food", "activity_type": "Beef", "quantity": -2,
        })
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_QUANTITY"


class TestProfiles:
    def test_create_defaults(self, client, unique_email):
        email = unique_email("create")
        r = client.post("/profiles", json={"email": email.upper()})
        assert r.status_code == 201
        body = r.json()
        assert body["email"] == email
        assert body["total_points"] == 0
        assert body["current_level"] == 1
        assert body["current_streak"] == 0
        assert Decimal(body["carbon_goal_monthly"]) == Decimal("500")
        assert body["is_banned"] is False

    def test_duplicate_email(self, client, unique_email):
        email = unique_email("dup")
        client.post("/profiles", json={"email": email})
        r = client.post("/profiles", json={"email": email})
        assert r.status_code == 409
        assert r.json()["code"] == "DUPLICATE"

    def test_invalid_email(self, client):
        r = client.post("/profiles", json={"email": "not-an-email"})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_read(self, client, profile):
        r = client.get(f"/profiles/{profile['id']}")
        assert r.status_code == 200
        assert r.json()["email"] == profile["email"]

    def test_read_missing(self, client):
        r = client.get("/profiles/99999999")
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    def test_update(self, client, profile):
        r = client.patch(f"/profiles/{profile['id']}", json={
            "location": "Pune", "carbon_goal_monthly": 300,
        })
        assert r.status_code == 200
        body = r.json()
        assert body["location"] == "Pune"
        assert Decimal(body["carbon_goal_monthly"]) == Decimal("300")
        assert body["full_name"] == "Test User"

    def test_update_null_goal_is_ignored(self, client, profile):
        r = client.patch(f"/profiles/{profile['id']}", json={"carbon_goal_monthly": None})
        assert r.status_code == 200
        assert Decimal(r.json()["carbon_goal_monthly"]) == Decimal("500")


class TestActivities:
    def test_log_activity(self, client, profile):
        r = _log(client, profile["id"], "transportation", "Car (Petrol)", 100,
                 day="2023-03-10", note="commute")
        assert r.status_code == 201
        body = r.json()
        a = body["activity"]
        assert Decimal(a["carbon_value"]) == Decimal("21.00")
        assert a["unit"] == "km"
        assert a["category"] == "transportation"
        assert a["day"] == "2023-03-10"
        assert a["note"] == "commute"
        assert body["points_awarded"] == 10
        assert "First Step" in {b["name"] for b in body["badges_awarded"]}

    def test_log_updates_profile_counters(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "food", "Rice", 1, day="2023-03-01")
        _log(client, pid, "food", "Rice", 1, day="2023-03-02")
        _log(client, pid, "food", "Rice", 1, day="2023-03-03")
        body = client.get(f"/profiles/{pid}").json()
        assert body["total_points"] == 30
        assert body["current_streak"] == 3
        assert body["longest_streak"] == 3
        assert body["last_active_day"] == "2023-03-03"

    def test_gap_resets_streak(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "food", "Rice", 1, day="2023-03-01")
        _log(client, pid, "food", "Rice", 1, day="2023-03-02")
        _log(client, pid, "food", "Rice", 1, day="2023-03-05")
        body = client.get(f"/profiles/{pid}").json()
        assert body["current_streak"] == 1
        assert body["longest_streak"] == 2

    def test_unknown_activity_not_persisted(self, client, profile):
        pid = profile["id"]
        r = _log(client, pid, "transportation", "Teleporter", 10)
        assert r.status_code == 422
        assert r.json()["code"] == "UNKNOWN_ACTIVITY"
        assert client.get(f"/profiles/{pid}/activities").json()["total"] == 0
        assert client.get(f"/profiles/{pid}").json()["total_points"] == 0

    def test_unknown_category(self, client, profile):
        r = _log(client, profile["id"], "water", "Shower", 10)
        assert r.status_code == 422
        assert r.json()["code"] == "UNKNOWN_CATEGORY"

    def test_negative_quantity(self, client, profile):
        r = _log(client, profile["id"], "food", "Beef", -1)
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_QUANTITY"

    def test_stored_record_reproduces_carbon_value(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "waste", "Electronic Waste", "0.125", day="2023-03-01")
        _log(client, pid, "transportation", "Car (Petrol)", "12.345", day="2023-03-01")
        factors = {
            f["activity"]: Decimal(f["factor"]) for f in client.get("/factors").json()["items"]
        }
        items = client.get(f"/profiles/{pid}/activities").json()["items"]
        assert len(items) == 2
        for item in items:
            expected = (Decimal(item["quantity"]) * factors[item["activity_type"]]).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
            assert Decimal(item["carbon_value"]) == expected

    def test_quantity_finer_than_storage_rejected(self, client, profile):
        pid = profile["id"]
        r = _log(client, pid, "waste", "Electronic Waste", "0.0004", day="2023-03-01")
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_QUANTITY"
        assert client.get(f"/profiles/{pid}/activities").json()["total"] == 0

    def test_trailing_zeros_accepted(self, client, profile):
        r = _log(client, profile["id"], "food", "Rice", "2.500000", day="2023-03-01")
        assert r.status_code == 201
        assert Decimal(r.json()["activity"]["quantity"]) == Decimal("2.5")

    def test_quantity_above_column_rejected(self, client, profile):
        r = _log(client, profile["id"], "food", "Rice", 10 ** 11, day="2023-03-01")
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_largest_quantity_accepted(self, client, profile):
        r = _log(client, profile["id"], "waste", "Electronic Waste", "99999999999.999",
                 day="2023-03-01")
        assert r.status_code == 201
        assert Decimal(r.json()["activity"]["carbon_value"]) == Decimal("29999999999999.70")

    def test_future_day_rejected(self, client, profile):
        pid = profile["id"]
        tomorrow = datetime.now(tz=timezone.utc).date() + timedelta(days=1)
        r = _log(client, pid, "food", "Rice", 1, day=tomorrow.isoformat())
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "FUTURE_DAY"
        assert body["details"]["day"] == tomorrow.isoformat()
        assert client.get(f"/profiles/{pid}/activities").json()["total"] == 0

    def test_future_day_does_not_block_streak(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "food", "Rice", 1, day="2099-01-01")
        for day in ("2023-05-01", "2023-05-02", "2023-05-03"):
            assert _log(client, pid, "food", "Rice", 1, day=day).status_code == 201
        body = client.get(f"/profiles/{pid}").json()
        assert body["current_streak"] == 3
        assert body["last_active_day"] == "2023-05-03"

    def test_missing_profile(self, client):
        r = _log(client, 99999999, "food", "Beef", 1)
        assert r.status_code == 404

    def test_list_newest_first(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "food", "Beef", 1, day="2023-03-01")
        _log(client, pid, "energy", "LPG", 1, day="2023-03-04")
        r = client.get(f"/profiles/{pid}/activities")
        assert r.status_code == 200
        items = r.json()["items"]
        assert [i["day"] for i in items] == ["2023-03-04", "2023-03-01"]

    def test_list_filter_category(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "food", "Beef", 1, day="2023-03-01")
        _log(client, pid, "energy", "LPG", 1, day="2023-03-01")
        r = client.get(f"/profiles/{pid}/activities?category=energy")
        assert r.json()["total"] == 1
        assert r.json()["items"][0]["activity_type"] == "LPG"

    def test_list_invalid_category_filter(self, client, profile):
        r = client.get(f"/profiles/{profile['id']}/activities?category=water")
        assert r.status_code == 422


class TestSummary:
    def _seed(self, client, pid):
        _log(client, pid, "transportation", "Car (Petrol)", 100, day="2023-03-10")  # 21.00
        _log(client, pid, "food", "Beef", 2, day="2023-03-08")                     # 54.00
        _log(client, pid, "energy", "Electricity", 150, day="2023-03-01")          # 123.00

    def test_week(self, client, profile):
        pid = profile["id"]
        self._seed(client, pid)
        r = client.get(f"/profiles/{pid}/summary?window=week&reference_date=2023-03-10")
        assert r.status_code == 200
        body = r.json()
        assert body["start"] == "2023-03-04"
        assert body["end"] == "2023-03-10"
        assert body["days"] == 7
        assert Decimal(body["total"]) == Decimal("75.00")
        assert Decimal(body["daily_average"]) == Decimal("10.71")
        assert body["activity_count"] == 2
        shares = {s["category"]: Decimal(s["percent"]) for s in body["shares"]}
        assert shares == {"transportation": Decimal("28.00"), "food": Decimal("72.00")}

    def test_month_includes_all(self, client, profile):
        pid = profile["id"]
        self._seed(client, pid)
        body = client.get(
            f"/profiles/{pid}/summary?window=month&reference_date=2023-03-10"
        ).json()
        assert Decimal(body["total"]) == Decimal("198.00")
        assert sum(Decimal(s["percent"]) for s in body["shares"]) == Decimal("100.00")

    def test_today(self, client, profile):
        pid = profile["id"]
        self._seed(client, pid)
        body = client.get(
            f"/profiles/{pid}/summary?window=today&reference_date=2023-03-10"
        ).json()
        assert Decimal(body["total"]) == Decimal("21.00")
        assert body["days"] == 1

    def test_empty_window(self, client, profile):
        body = client.get(
            f"/profiles/{profile['id']}/summary?window=week&reference_date=2023-03-10"
        ).json()
        assert Decimal(body["total"]) == Decimal("0")
        assert body["shares"] == []

    def test_invalid_window(self, client, profile):
        r = client.get(f"/profiles/{profile['id']}/summary?window=year")
        assert r.status_code == 422


class TestDashboard:
    def test_dashboard(self, client, profile):
        pid = profile["id"]
        client.patch(f"/profiles/{pid}", json={"carbon_goal_monthly": 100})
        _log(client, pid, "food", "Beef", 1, day="2023-03-09")                  # 27.00
        _log(client, pid, "transportation", "Car (Petrol)", 100, day="2023-03-10")  # 21.00
        r = client.get(f"/profiles/{pid}/dashboard?reference_date=2023-03-10")
        assert r.status_code == 200
        body = r.json()
        assert Decimal(body["today_carbon"]) == Decimal("21.00")
        assert Decimal(body["week_carbon"]) == Decimal("48.00")
        assert Decimal(body["month_carbon"]) == Decimal("48.00")
        assert Decimal(body["monthly_goal_progress"]) == Decimal("48.00")
        assert body["today_completed"] is True
        assert body["total_points"] == 20
        assert body["current_streak"] == 2
        assert body["next_milestone"] == "week"
        assert body["days_to_next_milestone"] == 5
        assert body["activities_count"] == 2
        assert body["badges_count"] >= 1

    def test_goal_progress_capped(self, client, profile):
        pid = profile["id"]
        client.patch(f"/profiles/{pid}", json={"carbon_goal_monthly": 10})
        _log(client, pid, "food", "Beef", 1, day="2023-03-10")
        body = client.get(f"/profiles/{pid}/dashboard?reference_date=2023-03-10").json()
        assert Decimal(body["monthly_goal_progress"]) == Decimal("100.00")

    def test_not_completed_today(self, client, profile):
        body = client.get(
            f"/profiles/{profile['id']}/dashboard?reference_date=2023-03-10"
        ).json()
        assert body["today_completed"] is False
        assert body["month_shares"] == []


class TestBadges:
    def test_earned_badges(self, client, profile):
        pid = profile["id"]
        _log(client, pid, "food", "Beef", 4, day="2023-03-10")  # 108.00
        r = client.get(f"/profiles/{pid}/badges")
        assert r.status_code == 200
        names = {b["name"] for b in r.json()}
        assert {"First Step", "Carbon Counter"} <= names


class TestLeaderboard:
    def test_ranking_and_ban_exclusion(self, client, db, unique_email):
        ids = []
        for _ in range(3):
            r = client.post("/profiles", json={"email": unique_email("lb")})
            ids.append(r.json()["id"])
        top = 10 ** 9
        points = {ids[0]: top, ids[1]: top + 5, ids[2]: top}
        for pid, pts in points.items():
            db.get(Profile, pid).total_points = pts
        db.commit()

        r = client.get("/leaderboard?limit=3")
        assert r.status_code == 200
        entries = r.json()
        assert [e["profile_id"] for e in entries] == [ids[1], ids[0], ids[2]]
        assert [e["rank"] for e in entries] == [1, 2, 3]

        client.post(f"/admin/users/{ids[1]}/ban", json={"reason": "spam"})
        entries = client.get("/leaderboard?limit=2").json()
        assert [e["profile_id"] for e in entries] == [ids[0], ids[2]]
