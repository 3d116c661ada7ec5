"""Integration tests for device profile API endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

DEVICE_ID = "3f2b8c1e-9d4a-4e6b-a7c5-1b2d3e4f5a6b"


def profile_payload(**overrides) -> dict:
    """Build a saveProfile request body."""
    payload = {
        "deviceId": DEVICE_ID,
        "vibes": ["sarcastic"],
        "language": "Nepali",
        "reminderTimes": ["07:15", "19:00"],
    }
    payload.update(overrides)
    return payload


class TestSaveProfile:
    """Tests for POST /api/v1/device-profiles endpoint."""

    def test_creates_then_updates(self, client: TestClient) -> None:
        """Test that the first save creates and the second updates."""
        created = client.post("/api/v1/device-profiles", json=profile_payload())
        updated = client.post("/api/v1/device-profiles", json=profile_payload(vibes=["kind"]))

        assert created.status_code == 200
        assert created.json()["action"] == "created"
        assert updated.status_code == 200
        assert updated.json() == {"id": created.json()["id"], "action": "updated"}

    def test_invalid_language_returns_422_with_message(self, client: TestClient) -> None:
        """Test that rule violations come back with their message."""
        response = client.post("/api/v1/device-profiles", json=profile_payload(language="French"))

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "validation_error"
        assert data["message"] == "Language must be English or Nepali"

    def test_wrong_argument_shape_rejected(self, client: TestClient) -> None:
        """Test that a non-list vibes argument fails shape validation."""
        response = client.post("/api/v1/device-profiles", json=profile_payload(vibes="sarcastic"))

        assert response.status_code == 422


class TestGetProfile:
    """Tests for GET /api/v1/device-profiles/{device_id} endpoint."""

    def test_returns_camel_case_profile(self, client: TestClient) -> None:
        """Test that the stored profile is returned with camelCase fields."""
        client.post("/api/v1/device-profiles", json=profile_payload(aiProvider="groq"))

        response = client.get(f"/api/v1/device-profiles/{DEVICE_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["deviceId"] == DEVICE_ID
        assert data["reminderTimes"] == ["07:15", "19:00"]
        assert data["aiProvider"] == "groq"
        assert data["dailyRoastCount"] == 0
        assert data["lastRoastDate"] == ""
        assert data["createdAt"] == data["updatedAt"]

    def test_missing_profile_returns_null(self, client: TestClient) -> None:
        """Test the absent-value response."""
        response = client.get(f"/api/v1/device-profiles/{DEVICE_ID}")

        assert response.status_code == 200
        assert response.json() is None


class TestRoasts:
    """Tests for the roast counter endpoints."""

    def test_quota_flow(self, client: TestClient) -> None:
        """Test three counted roasts, then a 429 with retry headers."""
        client.post("/api/v1/device-profiles", json=profile_payload())
        url = f"/api/v1/device-profiles/{DEVICE_ID}/roasts"

        remaining = [client.post(url).json()["remaining"] for _ in range(3)]
        refused = client.post(url)

        assert remaining == [2, 1, 0]
        assert refused.status_code == 429
        assert refused.json()["error"] == "quota_exceeded"
        assert refused.json()["message"] == "Daily roast limit reached (max 3)"
        assert int(refused.headers["Retry-After"]) > 0
        assert refused.headers["X-RateLimit-Limit"] == "3"

        status = client.get(url).json()
        assert status["dailyRoastCount"] == 3
        assert status["remaining"] == 0

    def test_unknown_device_returns_404(self, client: TestClient) -> None:
        """Test that counting for a missing profile fails."""
        response = client.post(f"/api/v1/device-profiles/{DEVICE_ID}/roasts")

        assert response.status_code == 404
        assert response.json()["message"] == "Device profile not found"


class TestStats:
    """Tests for GET /api/v1/device-profiles/stats endpoint."""

    def test_counts_devices(self, client: TestClient) -> None:
        """Test that freshly saved devices count as recent."""
        client.post("/api/v1/device-profiles", json=profile_payload())
        client.post(
            "/api/v1/device-profiles",
            json=profile_payload(deviceId="9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"),
        )

        response = client.get("/api/v1/device-profiles/stats")

        assert response.status_code == 200
        assert response.json() == {"totalDevices": 2, "recentDevices": 2}

    def test_unexpected_error_returns_generic_500(self, client: TestClient) -> None:
        """Test that an unhandled failure is hidden behind internal_error."""
        with patch(
            "src.api.routes.device_profiles.DeviceProfileService.get_stats",
            new=AsyncMock(side_effect=RuntimeError("connection reset")),
        ):
            response = client.get(
                "/api/v1/device-profiles/stats",
                headers={"X-Request-ID": "req-123"},
            )

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "internal_error"
        assert data["message"] == "An unexpected error occurred"
        assert data["request_id"] == "req-123"
        assert set(data) == {"error", "message", "request_id", "timestamp"}
