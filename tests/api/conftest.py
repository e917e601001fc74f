"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient

from core.capture_controller import CaptureController
from core.enums import SourceType
from core.output_formatter import OutputFormatter
from services.camera_service import CameraService


def install_state(app, file_cache, selection_picker, capture_controller):
    """Set app state the same way startup does, with test managers"""
    app.state.file_cache = file_cache
    app.state.selection_picker = selection_picker
    app.state.capture_controller = capture_controller
    app.state.camera_service = CameraService(capture_controller, file_cache)
    app.state.config = {
        "storage": {"root_dir": str(file_cache.root_dir)},
        "capture": {"session_timeout_s": 5},
    }


@pytest.fixture(scope="function")
def client(file_cache, selection_picker, capture_controller):
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from main import app

    install_state(app, file_cache, selection_picker, capture_controller)

    # Create test client (no context manager to avoid blocking)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client


@pytest.fixture(scope="function")
def live_client(tmp_path, monkeypatch, file_cache, selection_picker, cancel_picker):
    """
    Test client running the application lifespan, so that requests made
    from several threads share one event loop.

    Library sources are served by the selection picker, the camera
    always reports a user cancel.
    """
    from main import app

    # Startup creates the default cache directory relative to the cwd
    monkeypatch.chdir(tmp_path)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        capture_controller = CaptureController(
            pickers={
                SourceType.PHOTO_LIBRARY: selection_picker,
                SourceType.SAVED_ALBUM: selection_picker,
                SourceType.CAMERA: cancel_picker,
            },
            formatter=OutputFormatter(file_cache),
            session_timeout_s=5,
        )
        install_state(app, file_cache, selection_picker, capture_controller)

        yield test_client
