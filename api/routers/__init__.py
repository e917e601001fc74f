"""
API Routers for the Camera Service
"""

from . import camera, picker, system

__all__ = ["camera", "picker", "system"]
