"""
Custom exceptions and exception handlers for the Camera Service.
"""

import functools
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.constants import ErrorMessages

logger = logging.getLogger(__name__)


class CameraServiceException(Exception):
    """Base exception for camera service errors"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class FileHandlingError(CameraServiceException):
    """Raised when the media cache cannot be read or written"""


class MaxCacheError(CameraServiceException):
    """Raised when a media kind has reached its file limit"""

    def __init__(self, message: str = ErrorMessages.MAX_CACHE_REACHED):
        super().__init__(message)


class CameraNotAccessibleError(CameraServiceException):
    """Raised when no capture device can be opened"""

    status_code = 503

    def __init__(self, message: str = ErrorMessages.CAMERA_NOT_ACCESSIBLE):
        super().__init__(message)


class NoPendingSelectionError(CameraServiceException):
    """Raised when a selection arrives but no picker is waiting for one"""

    status_code = 409

    def __init__(self, message: str = ErrorMessages.NO_PENDING_SELECTION):
        super().__init__(message)


class InvalidSelectionError(CameraServiceException):
    """Raised for a selection the picker cannot accept"""

    status_code = 400


def safe_endpoint(func):
    """
    Decorator converting service exceptions raised by an endpoint into
    HTTP errors. HTTPException passes through unchanged.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except CameraServiceException as e:
            logger.warning(f"{func.__name__}: {e.message}")
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {e}")

    return wrapper


async def camera_service_exception_handler(
    request: Request, exc: CameraServiceException
) -> JSONResponse:
    """Render service exceptions that escape an endpoint"""
    logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI):
    """Register exception handlers on the application"""
    app.add_exception_handler(CameraServiceException, camera_service_exception_handler)
