"""
OpenCV Camera Picker - Captures photos and short videos from a local device
"""

import asyncio
import logging
import os
import tempfile
import time
from threading import Lock
from typing import List, Optional, Sequence

import cv2
import numpy as np

from api.exceptions import CameraNotAccessibleError
from core.constants import CaptureConstants
from core.enums import MediaType
from core.image.converters import ImageConverters
from core.media_picker import MediaPicker, PickedMedia, PickerRequest

logger = logging.getLogger(__name__)


class OpenCVCameraPicker(MediaPicker):
    """
    Picker for the camera source.

    ``cameraDirection`` selects the device index from ``devices``. Photos are
    a single frame encoded as JPEG; videos are recorded for a fixed duration.
    """

    def __init__(
        self,
        devices: Sequence[int] = CaptureConstants.DEFAULT_CAMERA_DEVICES,
        video_duration_s: float = CaptureConstants.DEFAULT_VIDEO_DURATION_S,
        video_fps: int = CaptureConstants.DEFAULT_VIDEO_FPS,
    ):
        self.devices: List[int] = list(devices) or [0]
        self.video_duration_s = video_duration_s
        self.video_fps = video_fps
        self.lock = Lock()

        logger.info(f"Camera picker initialized with devices {self.devices}")

    def device_for(self, direction: int) -> int:
        """Device index for a camera direction, falling back to the first device"""
        if 0 <= direction < len(self.devices):
            return self.devices[direction]
        logger.warning(f"Unknown camera direction {direction}, using device {self.devices[0]}")
        return self.devices[0]

    def is_available(self) -> bool:
        """Check that the default device can be opened"""
        cap = cv2.VideoCapture(self.devices[0])
        try:
            return cap.isOpened()
        finally:
            cap.release()

    async def pick(self, request: PickerRequest) -> Optional[PickedMedia]:
        if request.media_type == MediaType.VIDEO:
            data = await asyncio.to_thread(self._record_video, request)
            return PickedMedia(data=data, media_type=MediaType.VIDEO)

        data = await asyncio.to_thread(self._capture_photo, request)
        return PickedMedia(data=data, media_type=MediaType.PHOTO)

    def _open(self, direction: int) -> cv2.VideoCapture:
        device = self.device_for(direction)
        cap = cv2.VideoCapture(device)
        if not cap.isOpened():
            cap.release()
            logger.error(f"Camera device {device} not accessible")
            raise CameraNotAccessibleError()
        return cap

    def _read_frame(self, cap: cv2.VideoCapture) -> np.ndarray:
        ret, frame = cap.read()
        if not ret or frame is None:
            raise CameraNotAccessibleError()
        return frame

    def _capture_photo(self, request: PickerRequest) -> bytes:
        """Grab one frame and encode it as JPEG"""
        with self.lock:
            cap = self._open(request.camera_direction)
            try:
                for _ in range(CaptureConstants.WARMUP_FRAMES):
                    cap.read()
                frame = self._read_frame(cap)
            finally:
                cap.release()

        logger.info(f"Captured frame {frame.shape[1]}x{frame.shape[0]}")
        return ImageConverters.to_jpeg(frame, request.compression)

    def _record_video(self, request: PickerRequest) -> bytes:
        """Record a clip into a temporary file and return its bytes"""
        fd, path = tempfile.mkstemp(suffix=".mov")
        os.close(fd)

        try:
            with self.lock:
                cap = self._open(request.camera_direction)
                writer = None
                try:
                    frame = self._read_frame(cap)
                    height, width = frame.shape[:2]
                    fourcc = cv2.VideoWriter_fourcc(*CaptureConstants.VIDEO_FOURCC)
                    writer = cv2.VideoWriter(path, fourcc, self.video_fps, (width, height))

                    frame_count = 0
                    deadline = time.monotonic() + self.video_duration_s
                    while time.monotonic() < deadline:
                        writer.write(frame)
                        frame_count += 1
                        frame = self._read_frame(cap)
                finally:
                    if writer is not None:
                        writer.release()
                    cap.release()

            logger.info(f"Recorded {frame_count} frames ({width}x{height}) to {path}")
            with open(path, "rb") as f:
                return f.read()
        finally:
            if os.path.exists(path):
                os.remove(path)
