"""
Integration tests for the picker and system endpoints
"""

import pytest

from api.exceptions import InvalidSelectionError
from api.routers.picker import media_type_for
from core.constants import ErrorMessages
from core.enums import MediaType


class TestPickerEndpoints:
    """Test picker endpoints without a waiting session"""

    def test_nothing_pending(self, client):
        response = client.get("/camera-picker/pending")

        assert response.status_code == 200
        assert response.json()["pending"] is False
        assert response.json()["source_type"] is None

    def test_selection_without_pending(self, client, test_jpeg):
        response = client.post(
            "/camera-picker/selection",
            content=test_jpeg,
            headers={"Content-Type": "image/jpeg"},
        )

        assert response.status_code == 409
        assert response.json()["detail"] == ErrorMessages.NO_PENDING_SELECTION

    def test_selection_unsupported_type(self, client):
        response = client.post(
            "/camera-picker/selection",
            content=b"hello",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 400

    def test_cancel_without_pending(self, client):
        response = client.post("/camera-picker/cancel")

        assert response.status_code == 409


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("image/jpeg", MediaType.PHOTO),
        ("IMAGE/PNG; charset=binary", MediaType.PHOTO),
        ("video/quicktime", MediaType.VIDEO),
    ],
)
def test_media_type_for(content_type, expected):
    assert media_type_for(content_type) == expected


def test_media_type_for_unknown():
    with pytest.raises(InvalidSelectionError):
        media_type_for("application/json")


class TestSystemEndpoints:
    """Test system endpoints"""

    def test_status(self, client, file_cache):
        file_cache.save(b"p", MediaType.PHOTO)

        response = client.get("/api/system/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["capture_state"] == "idle"
        assert data["selection_pending"] is False
        assert data["cache_usage"]["photo"] == {"count": 1, "max_files": 5}
        assert data["cache_usage"]["video"] == {"count": 0, "max_files": 2}
        assert "process_mb" in data["memory_usage"]

    def test_config(self, client):
        response = client.get("/api/system/config")

        assert response.status_code == 200
        assert response.json()["capture"]["session_timeout_s"] == 5

    def test_health(self, client):
        assert client.get("/api/system/health").json()["status"] == "healthy"
        assert client.get("/health").json()["services"]["camera_service"] is True

    def test_root(self, client):
        assert client.get("/").json()["endpoints"]["camera"] == "/camera"
