"""Tests for the response envelope."""

import json
from datetime import UTC, datetime

from app.core.responses import ApiResponse, ResponseTerminated


class TestApiResponse:
    """Tests for ApiResponse."""

    def test_ok_envelope_includes_data(self):
        response = ApiResponse.ok("Done.", {"accessToken": "abc"})

        assert response.success is True
        assert response.to_dict() == {
            "success": True,
            "message": "Done.",
            "data": {"accessToken": "abc"},
        }

    def test_error_envelope_omits_data(self):
        response = ApiResponse.error("Access denied. Insufficient permissions.", 403)

        assert response.success is False
        assert response.to_dict() == {
            "success": False,
            "message": "Access denied. Insufficient permissions.",
        }

    def test_401_response_advertises_bearer(self):
        json_response = ApiResponse.error("nope", 401).to_json_response()

        assert json_response.status_code == 401
        assert json_response.headers["www-authenticate"] == "Bearer"

    def test_403_response_has_no_challenge(self):
        json_response = ApiResponse.error("nope", 403).to_json_response()

        assert "www-authenticate" not in json_response.headers

    def test_json_response_encodes_datetimes(self):
        created = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        json_response = ApiResponse.ok("ok", {"created_at": created}).to_json_response()

        body = json.loads(json_response.body)

        assert body["data"]["created_at"].startswith("2024-05-01T12:00:00")


class TestResponseTerminated:
    """Tests for ResponseTerminated."""

    def test_carries_response(self):
        response = ApiResponse.error("gone", 404)

        exc = ResponseTerminated(response)

        assert exc.response is response
        assert str(exc) == "gone"
