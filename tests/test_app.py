"""End-to-end tests for the HTTP surface: routes, error bodies and CORS."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from kiosk.app import create_app
from kiosk.booking_providers.base import BookingProvider, StatusUpdateResult
from kiosk.booking_providers.bokun import BokunBookingProvider
from kiosk.config import Settings

KIOSK = "http://kiosk.seatripsreykjavik.com"

BOOKING = {
    "id": 1,
    "bookingRef": "ABC123",
    "passengers": [{"id": 9, "firstName": "Jane", "lastName": "Doe"}],
    "activities": [{"title": "Whale Watching", "startTime": "2024-06-01T09:00:00Z"}],
}

EXPECTED_PASS = {
    "experienceName": "Whale Watching",
    "date": "Saturday, June 1, 2024",
    "time": "09:00 AM",
    "bookingRef": "ABC123",
    "customerName": "Jane Doe",
    "pax": 1,
}


def _settings():
    return Settings(
        bokun_api_url="https://api.bokun.test",
        bokun_access_key="access-key",
        bokun_secret_key="secret-key",
        display_timezone="Atlantic/Reykjavik",
    )


class FakeBokun:
    """Records Bokun calls and answers with canned status/body pairs."""

    def __init__(self, lookup_status=200, lookup_body=BOOKING, update_status=200, update_body=""):
        self.lookup_status = lookup_status
        self.lookup_body = lookup_body
        self.update_status = update_status
        self.update_body = update_body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return httpx.Response(self.update_status, text=self.update_body)
        if isinstance(self.lookup_body, str):
            return httpx.Response(self.lookup_status, text=self.lookup_body)
        return httpx.Response(self.lookup_status, json=self.lookup_body)

    @property
    def updates(self):
        return [r for r in self.requests if r.method == "POST"]


def _client(bokun: FakeBokun) -> TestClient:
    settings = _settings()
    provider = BokunBookingProvider(
        api_url=settings.bokun_api_url,
        access_key=settings.bokun_access_key,
        secret_key=settings.bokun_secret_key,
        transport=httpx.MockTransport(bokun),
    )
    return TestClient(create_app(settings=settings, provider=provider))


# ── Check-in endpoint ──────────────────────────────────────────────


class TestCheckInEndpoint:
    def test_end_to_end_boarding_pass(self):
        bokun = FakeBokun()
        resp = _client(bokun).get("/api/booking/ABC123")

        assert resp.status_code == 200
        assert resp.json() == EXPECTED_PASS

        lookup, update = bokun.requests
        assert lookup.url.path == "/booking/find-by-reference/ABC123"
        assert json.loads(update.content) == {
            "bookingId": 1,
            "participantIds": [9],
            "status": "ARRIVED",
        }

    @pytest.mark.parametrize("path", ["/api/booking", "/api/booking/", "/api/booking/%20%20"])
    def test_missing_reference_is_400(self, path):
        bokun = FakeBokun()
        resp = _client(bokun).get(path)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Booking reference is required"}
        assert bokun.requests == []

    @pytest.mark.parametrize("status", [403, 404, 500])
    def test_lookup_failure_mirrors_remote_status(self, status):
        bokun = FakeBokun(lookup_status=status, lookup_body="secret remote detail")
        resp = _client(bokun).get("/api/booking/ABC123")

        assert resp.status_code == status
        assert resp.json() == {"error": "Booking not found or API key is invalid."}
        assert "secret remote detail" not in resp.text
        assert bokun.updates == []

    def test_update_failure_still_returns_pass(self):
        bokun = FakeBokun(update_status=500, update_body="update broke")
        resp = _client(bokun).get("/api/booking/ABC123")

        assert resp.status_code == 200
        assert resp.json() == EXPECTED_PASS
        assert len(bokun.updates) == 1

    def test_null_last_name_still_checks_in(self):
        booking = {**BOOKING, "passengers": [{"id": 9, "firstName": "Jane", "lastName": None}]}
        bokun = FakeBokun(lookup_body=booking)
        resp = _client(bokun).get("/api/booking/ABC123")

        assert resp.status_code == 200
        assert resp.json()["customerName"] == "Jane"
        assert len(bokun.updates) == 1

    @pytest.mark.parametrize("field", ["passengers", "activities"])
    def test_incomplete_booking_is_handled(self, field):
        bokun = FakeBokun(lookup_body={**BOOKING, field: []})
        resp = _client(bokun).get("/api/booking/ABC123")

        assert resp.status_code == 502
        assert "error" in resp.json()

    def test_repeat_check_in_same_pass(self):
        bokun = FakeBokun()
        client = _client(bokun)
        first = client.get("/api/booking/ABC123").json()
        second = client.get("/api/booking/ABC123").json()

        assert first == second == EXPECTED_PASS
        assert len(bokun.updates) == 2

    def test_unexpected_fault_is_generic_500(self):
        provider = MagicMock(spec=BookingProvider)
        provider.find_booking = AsyncMock(side_effect=RuntimeError("db password is hunter2"))
        provider.update_participant_statuses = AsyncMock(return_value=StatusUpdateResult(ok=True))
        client = TestClient(create_app(settings=_settings(), provider=provider))

        resp = client.get("/api/booking/ABC123")

        assert resp.status_code == 500
        assert resp.json() == {"error": "An internal error occurred on the server."}
        assert "hunter2" not in resp.text

    def test_invalid_json_from_remote_is_500(self):
        bokun = FakeBokun(lookup_body="<html>not json</html>")
        resp = _client(bokun).get("/api/booking/ABC123")
        assert resp.status_code == 500
        assert resp.json() == {"error": "An internal error occurred on the server."}


# ── CORS on the real app ───────────────────────────────────────────


class TestCors:
    def test_kiosk_origin_granted(self):
        resp = _client(FakeBokun()).get("/api/booking/ABC123", headers={"Origin": KIOSK})
        assert resp.headers["access-control-allow-origin"] == KIOSK
        assert resp.headers["access-control-allow-headers"] == "Origin, X-Requested-With, Content-Type, Accept"

    def test_unlisted_origin_not_granted(self):
        bokun = FakeBokun()
        resp = _client(bokun).get("/api/booking/ABC123", headers={"Origin": "http://evil.example"})
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers
        assert resp.headers["vary"] == "Origin"

    def test_error_responses_carry_grant(self):
        resp = _client(FakeBokun()).get("/api/booking/", headers={"Origin": KIOSK})
        assert resp.status_code == 400
        assert resp.headers["access-control-allow-origin"] == KIOSK


class TestHealth:
    def test_health(self):
        resp = _client(FakeBokun()).get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
