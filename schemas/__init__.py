"""
Schemas Package

This package contains all Pydantic schemas for data validation and serialization,
organized by domain:
- camera: capture options and the response envelope
- system: status and picker state
"""

from .camera import CameraResponse, CaptureOptions
from .system import CacheUsage, PendingSelection, SystemStatus

__all__ = [
    # Camera models
    "CaptureOptions",
    "CameraResponse",
    # System models
    "CacheUsage",
    "PendingSelection",
    "SystemStatus",
]
