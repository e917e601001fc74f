"""
Camera API Router

POST, GET and DELETE are routed to the camera service. Any other verb on a
camera path is answered by the service as well, through
``method_not_allowed_handler``, so the 405 always carries the service's
``Allow`` header.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_camera_service
from services.camera_service import CameraRequest, CameraService

logger = logging.getLogger(__name__)

router = APIRouter()

PREFIX = "/camera"

ROUTED_METHODS = ["GET", "POST", "DELETE"]


def is_camera_path(path: str) -> bool:
    """True for /camera and /camera/<entity>"""
    return path == PREFIX or path.startswith(PREFIX + "/")


async def _dispatch(request: Request, camera_service: CameraService) -> Response:
    body = await request.body()
    camera_request = CameraRequest(
        method=request.method,
        path=request.url.path,
        query=request.url.query or None,
        body=body or None,
    )
    logger.debug(f"{camera_request.method} {camera_request.path}")

    result = await camera_service.handle(camera_request)
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)


@router.api_route("", methods=ROUTED_METHODS)
async def camera(
    request: Request, camera_service: CameraService = Depends(get_camera_service)
) -> Response:
    """Start a capture session (POST)"""
    return await _dispatch(request, camera_service)


@router.api_route("/{entity}", methods=ROUTED_METHODS)
async def camera_entity(
    entity: str, request: Request, camera_service: CameraService = Depends(get_camera_service)
) -> Response:
    """List (GET) or delete (DELETE) cached files of an entity: image or video"""
    return await _dispatch(request, camera_service)


async def method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Hand unrouted verbs on camera paths to the camera service"""
    if exc.status_code == 405 and is_camera_path(request.url.path):
        return await _dispatch(request, get_camera_service(request))
    return await http_exception_handler(request, exc)
