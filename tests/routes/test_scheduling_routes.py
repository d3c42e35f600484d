"""
HTTP tests for the scheduling routes.

The app's session dependency is replaced with the test session so the
requests see the fixtures' rows.
"""

import pytest
from fastapi.testclient import TestClient

from litrato.api.dependencies import get_db, get_scheduling_settings
from litrato.main import app

BASE = "/api/v1/scheduling"
MISSING_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"


@pytest.fixture
def client(db, scheduling_config):
    def _override_db():
        yield db

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_scheduling_settings] = lambda: scheduling_config
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestConflictCheckRoute:
    def test_free_slot(self, client, package):
        response = client.post(
            f"{BASE}/conflicts/check",
            json={"package_id": package.id, "event_date": "2026-12-12", "start_time": "16:00"},
        )

        assert response.status_code == 200
        assert response.json() == {"conflict": False, "conflicting_booking": None}

    def test_conflicting_slot(self, client, package, make_confirmed):
        make_confirmed("10:00")

        response = client.post(
            f"{BASE}/conflicts/check",
            json={"package_id": package.id, "event_date": "2026-12-12", "start_time": "13:00"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "conflict": True,
            "conflicting_booking": {"event_date": "2026-12-12", "event_time": "10:00"},
        }

    def test_bad_time_is_400(self, client, package):
        response = client.post(
            f"{BASE}/conflicts/check",
            json={"package_id": package.id, "event_date": "2026-12-12", "start_time": "25:00"},
        )

        assert response.status_code == 400

    def test_malformed_package_id_is_400(self, client):
        response = client.post(
            f"{BASE}/conflicts/check",
            json={"package_id": "nope", "event_date": "2026-12-12", "start_time": "10:00"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["details"]["field"] == "package_id"

    def test_unknown_package_is_404(self, client):
        response = client.post(
            f"{BASE}/conflicts/check",
            json={"package_id": MISSING_ID, "event_date": "2026-12-12", "start_time": "10:00"},
        )

        assert response.status_code == 404


class TestAvailabilityRoute:
    def test_daily_availability(self, client, package, make_confirmed):
        make_confirmed("10:00")

        response = client.get(f"{BASE}/availability/2026-12-12")

        assert response.status_code == 200
        body = response.json()
        assert body["date"] == "2026-12-12"
        assert body["constraints"]["buffer_hours"] == 2
        entry = body["packages"][0]
        assert entry["status"] == "limited"
        assert entry["blocked_windows"] == [{"start": "08:00", "end": "16:00"}]
        assert entry["start_windows"] == [{"start": "18:00", "end": "21:59"}]

    def test_invalid_date_is_422(self, client):
        assert client.get(f"{BASE}/availability/not-a-date").status_code == 422


class TestRequestDecisionRoutes:
    def test_accept(self, client, make_request):
        request = make_request("10:00")

        response = client.post(f"{BASE}/requests/{request.id}/accept")

        assert response.status_code == 200
        body = response.json()
        assert body["request_id"] == request.id
        assert body["booking_status"] == "scheduled"
        assert (body["event_start"], body["event_end"]) == ("10:00", None)

    def test_accept_conflict_is_409(self, client, make_request, make_confirmed):
        make_confirmed("10:00")
        request = make_request("12:00")

        response = client.post(f"{BASE}/requests/{request.id}/accept")

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "BOOKING_CONFLICT"
        assert detail["details"] == {"event_date": "2026-12-12", "event_time": "10:00"}

    def test_accept_stale_is_409(self, client, make_request):
        request = make_request("10:00", status="rejected")

        response = client.post(f"{BASE}/requests/{request.id}/accept")

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "STALE_STATE"

    def test_accept_unknown_is_404(self, client):
        assert client.post(f"{BASE}/requests/{MISSING_ID}/accept").status_code == 404

    def test_reject_with_reason(self, client, make_request):
        request = make_request("10:00")

        response = client.post(
            f"{BASE}/requests/{request.id}/reject", json={"reason": "Booth under repair"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["notes"] == "Rejected: Booth under repair"

    def test_reject_without_body(self, client, make_request):
        request = make_request("10:00")

        response = client.post(f"{BASE}/requests/{request.id}/reject")

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

    def test_cancel(self, client, make_request):
        request = make_request("10:00")

        response = client.post(f"{BASE}/requests/{request.id}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"


class TestExtensionRoutes:
    @pytest.fixture
    def morning(self, make_confirmed):
        make_confirmed("15:00", customer_email="afternoon@example.com")
        return make_confirmed("10:00")

    def test_preflight(self, client, morning):
        response = client.post(
            f"{BASE}/confirmed/{morning.id}/extension/preflight", json={"hours": 2}
        )

        assert response.status_code == 200
        assert response.json() == {
            "conflict": True,
            "conflicting_booking": {"event_date": "2026-12-12", "event_time": "15:00"},
            "extension_amount": 4000.0,
        }

    def test_applied_extension_is_charged(self, client, morning):
        response = client.put(f"{BASE}/confirmed/{morning.id}/extension", json={"hours": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is True
        assert body["amount_due"] == 2000.0
        assert body["booking"]["event_end"] == "13:00"
        assert body["booking"]["extension_hours"] == 1

    def test_blocked_extension_is_not_an_error(self, client, morning):
        response = client.put(f"{BASE}/confirmed/{morning.id}/extension", json={"hours": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is False
        assert body["amount_due"] == 0.0
        assert body["conflicting_booking"]["event_time"] == "15:00"

    def test_add_hours(self, client, morning):
        response = client.put(
            f"{BASE}/confirmed/{morning.id}/extension", json={"add_hours": 1}
        )

        assert response.status_code == 200
        assert response.json()["requested_hours"] == 1

    def test_hours_and_add_hours_together_is_422(self, client, morning):
        response = client.put(
            f"{BASE}/confirmed/{morning.id}/extension", json={"hours": 1, "add_hours": 1}
        )

        assert response.status_code == 422

    def test_negative_hours_is_400(self, client, morning):
        response = client.put(f"{BASE}/confirmed/{morning.id}/extension", json={"hours": -1})

        assert response.status_code == 400


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_prometheus_endpoint(client, make_request):
    request = make_request("10:00")
    client.post(f"{BASE}/requests/{request.id}/accept")

    response = client.get("/metrics/prometheus")

    assert response.status_code == 200
    assert "litrato_booking_accept_outcomes_total" in response.text
