"""
Image format conversion utilities.

Handles conversions needed by capture sessions:
- NumPy arrays (OpenCV BGR format) to PIL Images
- Encoded photos of any format to JPEG at a given quality
- Raw bytes to line-wrapped base64 strings
"""

import base64
import io
import logging
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import APIConstants

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between image formats."""

    @staticmethod
    def numpy_to_pil(image: np.ndarray) -> Image.Image:
        """
        Convert NumPy array (OpenCV format) to PIL Image.

        Args:
            image: NumPy array in BGR format (OpenCV)

        Returns:
            PIL Image in RGB format
        """
        # Convert BGR to RGB if needed
        if len(image.shape) == 3 and image.shape[2] == 3:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        else:
            image_rgb = image

        return Image.fromarray(image_rgb)

    @staticmethod
    def to_jpeg(image: Union[np.ndarray, Image.Image, bytes], quality: int) -> bytes:
        """
        Encode an image as JPEG.

        Args:
            image: Input image (NumPy array, PIL Image, or encoded bytes)
            quality: JPEG quality (0-100)

        Returns:
            JPEG bytes

        Raises:
            ValueError: If encoded bytes cannot be decoded as an image
        """
        try:
            if isinstance(image, bytes):
                image = Image.open(io.BytesIO(image))
            elif isinstance(image, np.ndarray):
                image = ImageConverters.numpy_to_pil(image)

            # JPEG has no alpha channel or palette
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")

            buffer = io.BytesIO()
            image.save(buffer, format="JPEG", quality=quality)
            return buffer.getvalue()

        except UnidentifiedImageError as e:
            logger.error(f"Failed to decode image: {e}")
            raise ValueError("Unsupported image data") from e

    @staticmethod
    def to_base64(
        data: bytes,
        line_length: int = APIConstants.BASE64_LINE_LENGTH,
        separator: str = APIConstants.BASE64_LINE_SEPARATOR,
    ) -> str:
        """
        Encode bytes as base64 wrapped at a fixed line length.

        Args:
            data: Raw bytes
            line_length: Characters per line (0 disables wrapping)
            separator: Line separator

        Returns:
            Base64 encoded string
        """
        encoded = base64.b64encode(data).decode("ascii")
        if line_length <= 0:
            return encoded

        return separator.join(
            encoded[i : i + line_length] for i in range(0, len(encoded), line_length)
        )
