"""
Integration tests for FastAPI endpoints.

Tests verify calculator routes, period flows and error mapping
(422 for invalid input, 400 for period policies).
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402

WEEKDAY_SHIFT = {"date": "2025-03-04", "start_time": "12:00", "end_time": "22:00"}


def add_shift(client, period_id, **overrides):
    return client.post(f"/api/periods/{period_id}/shifts", json={**WEEKDAY_SHIFT, **overrides})


class TestPublicRoutes:
    def test_health_endpoint_returns_ok(self, test_client):
        """GET /health should return 200 OK for monitoring."""
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert "X-Request-ID" in response.headers

    def test_holidays(self, test_client):
        response = test_client.get("/api/holidays/2025")

        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2025
        assert len(data["holidays"]) == 17
        assert "2025-03-24" in data["holidays"]

    def test_holidays_year_out_of_range(self, test_client):
        assert test_client.get("/api/holidays/1200").status_code == 422


class TestCalculator:
    def test_classify_shift(self, test_client):
        response = test_client.post("/api/shifts/classify", json=WEEKDAY_SHIFT)

        assert response.status_code == 200
        data = response.json()
        assert data["hours"]["ORD"] == 8.0
        assert data["hours"]["HED"] == 1.0
        assert data["hours"]["HEN"] == 1.0
        assert data["total_payment"] == pytest.approx(7736.41 + 10830.98)

    def test_classify_invalid_shift_is_422(self, test_client):
        response = test_client.post("/api/shifts/classify", json={**WEEKDAY_SHIFT, "end_time": "10:00"})

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidShift"

    def test_financials_for_empty_period(self, test_client):
        response = test_client.post("/api/financials", json={})

        assert response.status_code == 200
        assert response.json()["financials"]["net_pay"] == pytest.approx(711750 * 0.92)

    def test_financials_with_hours_and_adjustments(self, test_client):
        response = test_client.post(
            "/api/financials",
            json={
                "days": [{"date": "2025-03-04", "hours": {"ORD": 8, "HED": 1, "HEN": 1}}],
                "transport_enabled": True,
                "incomes": [{"amount": 50000, "description": "Bono"}],
                "deductions": [{"amount": 20000}],
            },
        )

        assert response.status_code == 200
        data = response.json()
        extras = 7736.41 + 10830.98
        ibc = 711750 + extras + 50000
        assert data["summary"]["total_surcharge_overtime_pay"] == pytest.approx(extras)
        assert data["financials"]["contribution_base"] == pytest.approx(ibc)
        assert data["financials"]["net_pay"] == pytest.approx(ibc + 100000 - ibc * 0.08 - 20000)

    def test_financials_rejects_non_positive_adjustment(self, test_client):
        response = test_client.post("/api/financials", json={"incomes": [{"amount": 0}]})

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidAdjustment"

    def test_financials_rejects_negative_hours(self, test_client):
        response = test_client.post("/api/financials", json={"days": [{"date": "2025-03-04", "hours": {"HED": -2}}]})

        assert response.status_code == 422


class TestPeriods:
    def test_create_period_defaults_to_quincena(self, period):
        assert period["start_date"] == "2025-03-01"
        assert period["end_date"] == "2025-03-15"
        assert period["base_salary"] == 711750
        assert period["report"]["summary"]["day_count"] == 0
        assert period["report"]["financials"]["net_pay"] == pytest.approx(711750 * 0.92 + 100000)

    def test_create_period_with_end_before_start(self, test_client):
        response = test_client.post(
            "/api/periods",
            json={"employee_id": "E1", "start_date": "2025-03-15", "end_date": "2025-03-01"},
        )

        assert response.status_code == 422

    def test_list_and_get(self, test_client, period):
        listed = test_client.get("/api/periods", params={"employee_id": "E1"}).json()

        assert [p["id"] for p in listed] == [period["id"]]
        assert test_client.get(f"/api/periods/{period['id']}").json()["employee_id"] == "E1"
        assert test_client.get("/api/periods/999").status_code == 404

    def test_delete_period(self, test_client, period):
        assert test_client.delete(f"/api/periods/{period['id']}").status_code == 204
        assert test_client.get(f"/api/periods/{period['id']}").status_code == 404

    def test_turning_transport_off_removes_only_the_allowance(self, test_client, period):
        add_shift(test_client, period["id"])
        before = test_client.get(f"/api/periods/{period['id']}").json()["report"]["financials"]

        response = test_client.patch(f"/api/periods/{period['id']}", json={"transport_enabled": False})

        assert response.status_code == 200
        data = response.json()
        after = data["report"]["financials"]
        assert data["transport_enabled"] is False
        assert len(data["shifts"]) == 1
        assert before["net_pay"] - after["net_pay"] == pytest.approx(100000)
        assert after["contribution_base"] == pytest.approx(before["contribution_base"])

    def test_update_base_salary_and_end_date(self, test_client, period):
        response = test_client.patch(
            f"/api/periods/{period['id']}", json={"base_salary": 800000, "end_date": "2025-03-10"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["base_salary"] == 800000
        assert data["end_date"] == "2025-03-10"
        assert data["transport_enabled"] is True
        assert data["report"]["financials"]["contribution_base"] == pytest.approx(800000)

    def test_update_end_date_before_start_is_422(self, test_client, period):
        response = test_client.patch(f"/api/periods/{period['id']}", json={"end_date": "2025-02-28"})

        assert response.status_code == 422
        assert test_client.get(f"/api/periods/{period['id']}").json()["end_date"] == "2025-03-15"

    def test_update_end_date_leaving_shift_outside_is_400(self, test_client, period):
        add_shift(test_client, period["id"], date="2025-03-12")
        response = test_client.patch(f"/api/periods/{period['id']}", json={"end_date": "2025-03-10"})

        assert response.status_code == 400
        assert response.json()["error"] == "OutOfPeriodShift"
        assert test_client.get(f"/api/periods/{period['id']}").json()["end_date"] == "2025-03-15"

    def test_update_negative_salary_is_422(self, test_client, period):
        response = test_client.patch(f"/api/periods/{period['id']}", json={"base_salary": -1})

        assert response.status_code == 422

    def test_update_missing_period_is_404(self, test_client):
        assert test_client.patch("/api/periods/999", json={"transport_enabled": False}).status_code == 404

    def test_period_logs_carry_period_context(self, test_client, period, caplog):
        with caplog.at_level(logging.INFO, logger="nomina.routes.periods"):
            test_client.patch(f"/api/periods/{period['id']}", json={"transport_enabled": False})

        records = [r for r in caplog.records if r.name == "nomina.routes.periods"]
        assert records
        assert records[-1].period_id == period["id"]
        assert records[-1].employee_id == "E1"

    def test_add_shift(self, test_client, period):
        response = add_shift(test_client, period["id"])

        assert response.status_code == 201
        data = response.json()
        assert len(data["shifts"]) == 1
        assert data["shifts"][0]["overridden"] is False
        day = data["report"]["days"][0]
        assert day["hours"]["HEN"] == 1.0
        assert data["report"]["summary"]["total_surcharge_overtime_pay"] == pytest.approx(7736.41 + 10830.98)

    def test_add_shift_with_break_is_stored(self, test_client, period):
        response = add_shift(
            test_client, period["id"], include_break=True, break_start="15:00", break_end="18:00"
        )

        shift = response.json()["shifts"][0]
        assert shift["break_start"] == "15:00"
        assert response.json()["report"]["days"][0]["total_hours"] == 7.0

    def test_duplicate_date_is_400(self, test_client, period):
        add_shift(test_client, period["id"])
        response = add_shift(test_client, period["id"], start_time="06:00", end_time="10:00")

        assert response.status_code == 400
        assert response.json()["error"] == "DuplicateShiftDate"

    def test_shift_outside_period_is_400(self, test_client, period):
        response = add_shift(test_client, period["id"], date="2025-03-20")

        assert response.status_code == 400
        assert response.json()["error"] == "OutOfPeriodShift"

    def test_invalid_shift_is_422_and_not_stored(self, test_client, period):
        response = add_shift(test_client, period["id"], include_break=True, break_start="13:00")

        assert response.status_code == 422
        assert test_client.get(f"/api/periods/{period['id']}").json()["shifts"] == []

    def test_replace_shift(self, test_client, period):
        shift_id = add_shift(test_client, period["id"]).json()["shifts"][0]["id"]
        response = test_client.put(
            f"/api/periods/{period['id']}/shifts/{shift_id}",
            json={"date": "2025-03-04", "start_time": "08:00", "end_time": "16:00"},
        )

        assert response.status_code == 200
        assert response.json()["report"]["summary"]["total_surcharge_overtime_pay"] == 0.0

    def test_replace_shift_onto_other_shift_date(self, test_client, period):
        first = add_shift(test_client, period["id"]).json()["shifts"][0]["id"]
        add_shift(test_client, period["id"], date="2025-03-05")

        response = test_client.put(
            f"/api/periods/{period['id']}/shifts/{first}", json={**WEEKDAY_SHIFT, "date": "2025-03-05"}
        )

        assert response.status_code == 400

    def test_delete_shift(self, test_client, period):
        shift_id = add_shift(test_client, period["id"]).json()["shifts"][0]["id"]

        assert test_client.delete(f"/api/periods/{period['id']}/shifts/{shift_id}").status_code == 204
        assert test_client.get(f"/api/periods/{period['id']}").json()["report"]["summary"]["day_count"] == 0
        assert test_client.delete(f"/api/periods/{period['id']}/shifts/{shift_id}").status_code == 404


class TestHoursOverride:
    def test_override_and_revert(self, test_client, period):
        shift_id = add_shift(test_client, period["id"]).json()["shifts"][0]["id"]
        url = f"/api/periods/{period['id']}/shifts/{shift_id}/hours"

        overridden = test_client.put(url, json={"hours": {"ORD": 8, "RN": 2}})
        assert overridden.status_code == 200
        day = overridden.json()["report"]["days"][0]
        assert day["source"] == "overridden"
        assert day["hours"]["HEN"] == 0.0
        assert day["total_payment"] == pytest.approx(2 * 2166)
        assert overridden.json()["shifts"][0]["overridden"] is True

        reverted = test_client.delete(url)
        assert reverted.json()["report"]["days"][0]["source"] == "computed"
        assert reverted.json()["report"]["days"][0]["hours"]["HEN"] == 1.0

    @pytest.mark.parametrize("hours", [{"HED": -1}, {"NOPE": 1}])
    def test_invalid_override_is_422(self, test_client, period, hours):
        shift_id = add_shift(test_client, period["id"]).json()["shifts"][0]["id"]
        response = test_client.put(f"/api/periods/{period['id']}/shifts/{shift_id}/hours", json={"hours": hours})

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidHoursOverride"


class TestAdjustments:
    def test_income_and_deduction(self, test_client, period):
        base_net = period["report"]["financials"]["net_pay"]
        url = f"/api/periods/{period['id']}/adjustments"

        test_client.post(url, json={"kind": "income", "amount": 50000, "description": "Bono"})
        response = test_client.post(url, json={"kind": "deduction", "amount": 20000})

        assert response.status_code == 201
        data = response.json()
        assert {a["kind"] for a in data["adjustments"]} == {"income", "deduction"}
        assert data["report"]["financials"]["net_pay"] - base_net == pytest.approx(50000 * 0.92 - 20000)

    def test_delete_adjustment(self, test_client, period):
        url = f"/api/periods/{period['id']}/adjustments"
        adjustment_id = test_client.post(url, json={"kind": "income", "amount": 1000}).json()["adjustments"][0]["id"]

        assert test_client.delete(f"{url}/{adjustment_id}").status_code == 204
        assert test_client.get(f"/api/periods/{period['id']}").json()["adjustments"] == []
        assert test_client.delete(f"{url}/{adjustment_id}").status_code == 404

    @pytest.mark.parametrize("amount", [0, -100])
    def test_invalid_amount_is_422(self, test_client, period, amount):
        response = test_client.post(
            f"/api/periods/{period['id']}/adjustments", json={"kind": "income", "amount": amount}
        )

        assert response.status_code == 422

    def test_unknown_kind_is_422(self, test_client, period):
        response = test_client.post(f"/api/periods/{period['id']}/adjustments", json={"kind": "gift", "amount": 1})

        assert response.status_code == 422


class TestExports:
    def test_period_csv(self, test_client, period):
        add_shift(test_client, period["id"])
        response = test_client.get(f"/api/periods/{period['id']}/export.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("employee_id,period_start,period_end")
        assert lines[1].startswith("E1,2025-03-01,2025-03-15,711750.00")

    def test_bulk_csv(self, test_client, period):
        test_client.post("/api/periods", json={"employee_id": "E2", "start_date": "2025-03-16"})

        all_rows = test_client.get("/api/periods/export.csv").text.strip().splitlines()
        e2_rows = test_client.get("/api/periods/export.csv", params={"employee_id": "E2"}).text.strip().splitlines()

        assert len(all_rows) == 3
        assert len(e2_rows) == 2
        assert e2_rows[1].startswith("E2,2025-03-16,2025-03-31")

    def test_calendar(self, test_client, period):
        add_shift(test_client, period["id"])
        response = test_client.get(f"/api/periods/{period['id']}/calendar.ics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        assert "BEGIN:VCALENDAR" in response.text
        assert response.text.count("BEGIN:VEVENT") == 1
