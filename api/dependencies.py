"""
Shared FastAPI dependencies for the Camera Service.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from core.capture_controller import CaptureController
from core.file_cache import FileCacheManager
from core.media_picker import SelectionPicker
from services.camera_service import CameraService

logger = logging.getLogger(__name__)


class Managers:
    """Container for all manager instances."""

    def __init__(
        self,
        file_cache: FileCacheManager,
        capture_controller: CaptureController,
        selection_picker: SelectionPicker,
    ):
        self.file_cache = file_cache
        self.capture_controller = capture_controller
        self.selection_picker = selection_picker


def get_managers(request: Request) -> Managers:
    """
    Get all manager instances from app state.

    Args:
        request: FastAPI request object

    Returns:
        Managers container with all manager instances

    Raises:
        HTTPException: If managers not initialized
    """
    try:
        return Managers(
            file_cache=request.app.state.file_cache,
            capture_controller=request.app.state.capture_controller,
            selection_picker=request.app.state.selection_picker,
        )
    except AttributeError as e:
        logger.error(f"Managers not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Managers not initialized"
        )


def get_selection_picker(managers: Managers = Depends(get_managers)) -> Optional[SelectionPicker]:
    """Get SelectionPicker instance."""
    return managers.selection_picker


def get_camera_service(request: Request) -> CameraService:
    """
    Get the camera service held by the application.

    The service is created once at startup so that every request shares
    the same capture controller.
    """
    try:
        return request.app.state.camera_service
    except AttributeError as e:
        logger.error(f"Camera service not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Camera service not initialized"
        )


def get_config(request: Request) -> Dict[str, Any]:
    """
    Get application configuration.

    Args:
        request: FastAPI request object

    Returns:
        Configuration dictionary
    """
    try:
        return request.app.state.config
    except AttributeError:
        logger.warning("Config not found in app state, using defaults")
        return {}
