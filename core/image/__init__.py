"""
Image utilities used by capture sessions.

- converters: Format conversions (NumPy, PIL, JPEG, base64)
"""

from core.image.converters import ImageConverters

__all__ = ["ImageConverters"]
