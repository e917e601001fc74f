"""
Pytest configuration and fixtures for Camera Service tests
"""

import asyncio
from typing import Optional

import cv2
import numpy as np
import pytest

from core.capture_controller import CaptureController
from core.enums import MediaType, SourceType
from core.file_cache import FileCacheManager
from core.media_picker import MediaPicker, PickedMedia, PickerRequest, SelectionPicker
from core.output_formatter import OutputFormatter
from services.camera_service import CameraService


class FakePicker(MediaPicker):
    """Scripted picker returning a fixed result"""

    def __init__(
        self,
        result: Optional[PickedMedia] = None,
        available: bool = True,
        hold: bool = False,
    ):
        self.result = result
        self.available = available
        self.hold = hold
        self.requests = []
        self._release: Optional[asyncio.Event] = None

    def is_available(self) -> bool:
        return self.available

    async def pick(self, request: PickerRequest) -> Optional[PickedMedia]:
        self.requests.append(request)
        if self.hold:
            self._release = asyncio.Event()
            await self._release.wait()
        return self.result

    async def started(self):
        """Wait until a held pick is in progress"""
        while self._release is None:
            await asyncio.sleep(0.001)

    def release(self):
        """Let a held pick return its result"""
        self._release.set()


@pytest.fixture
def make_picker():
    """Factory for scripted pickers"""
    return FakePicker


@pytest.fixture
def test_image():
    """Create a test image for testing"""
    image = np.zeros((120, 160, 3), dtype=np.uint8)
    cv2.rectangle(image, (20, 20), (80, 80), (255, 255, 255), -1)
    cv2.circle(image, (120, 90), 20, (128, 128, 128), -1)
    return image


@pytest.fixture
def test_jpeg(test_image):
    """Test image encoded as JPEG"""
    _, buffer = cv2.imencode(".jpg", test_image)
    return buffer.tobytes()


@pytest.fixture
def test_png(test_image):
    """Test image encoded as PNG"""
    _, buffer = cv2.imencode(".png", test_image)
    return buffer.tobytes()


@pytest.fixture
def file_cache(tmp_path):
    """Create FileCacheManager with a temporary root"""
    manager = FileCacheManager(tmp_path / "camera", max_photo_files=5, max_video_files=2)
    manager.ensure_directories()
    return manager


@pytest.fixture
def photo_picker(test_jpeg):
    """Picker returning a photo"""
    return FakePicker(result=PickedMedia(data=test_jpeg, media_type=MediaType.PHOTO))


@pytest.fixture
def cancel_picker():
    """Picker where the user always cancels"""
    return FakePicker(result=None)


@pytest.fixture
def selection_picker():
    """Create SelectionPicker instance for testing"""
    return SelectionPicker()


@pytest.fixture
def capture_controller(file_cache, photo_picker, cancel_picker):
    """
    Controller with a photo library that returns a photo
    and a camera where the user cancels
    """
    return CaptureController(
        pickers={
            SourceType.PHOTO_LIBRARY: photo_picker,
            SourceType.CAMERA: cancel_picker,
        },
        formatter=OutputFormatter(file_cache),
        session_timeout_s=5,
    )


@pytest.fixture
def camera_service(capture_controller, file_cache):
    """Create CameraService instance for testing"""
    return CameraService(capture_controller, file_cache)
