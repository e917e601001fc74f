"""
Camera Service - Request router for the camera endpoints.

Maps a pseudo-HTTP request onto the capture controller (POST) or the
file cache (GET, DELETE) and renders the JSON response envelope.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import ValidationError

from api.exceptions import FileHandlingError, MaxCacheError
from core.capture_controller import CaptureController
from core.constants import APIConstants, ErrorMessages, ResponseMessages
from core.enums import MediaType, ResponseType
from core.file_cache import FileCacheManager
from schemas.camera import CameraResponse, CaptureOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraRequest:
    """Incoming request, immutable once received"""

    method: Optional[str]
    path: Optional[str]
    query: Optional[str] = None
    body: Optional[bytes] = None

    @property
    def entity(self) -> str:
        """Last path component, e.g. "image" in /camera/image"""
        return (self.path or "").rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ServiceResponse:
    """Status, headers and body returned exactly once per request"""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    @classmethod
    def from_camera_response(cls, response: CameraResponse) -> "ServiceResponse":
        return cls(
            status_code=200,
            headers={"Content-Type": APIConstants.JSON_MEDIA_TYPE},
            body=response.to_json(),
        )

    @classmethod
    def error_status(
        cls, status_code: int, headers: Optional[Dict[str, str]] = None
    ) -> "ServiceResponse":
        return cls(status_code=status_code, headers=dict(headers or {}))


class CameraService:
    """
    Service dispatching camera requests by HTTP method.

    POST starts a capture session, GET lists cached files of an entity and
    DELETE purges them. Structural problems are answered with 400/405;
    everything else is a 200 carrying a JSON envelope.
    """

    ENTITIES = {
        "image": (MediaType.PHOTO, ResponseType.PHOTO_LOCATION),
        "video": (MediaType.VIDEO, ResponseType.VIDEO_LOCATION),
    }

    def __init__(self, capture_controller: CaptureController, file_cache: FileCacheManager):
        """
        Initialize camera service.

        Args:
            capture_controller: Controller owning the capture state
            file_cache: Cache of saved media
        """
        self.capture_controller = capture_controller
        self.file_cache = file_cache

    async def handle(self, request: CameraRequest) -> ServiceResponse:
        """
        Handle one request.

        Args:
            request: Incoming request

        Returns:
            ServiceResponse with status, headers and optional JSON body
        """
        if not request.path or not request.method:
            logger.error("Camera Service: request without path or method")
            return ServiceResponse.error_status(400)

        method = request.method.upper()
        if method == "POST":
            return await self._handle_post(request)
        elif method == "GET":
            return await self._handle_get(request)
        elif method == "DELETE":
            return await self._handle_delete(request)

        logger.error(f"Camera Service: invalid HTTP method {request.method}")
        return ServiceResponse.error_status(405, {"Allow": APIConstants.ALLOWED_METHODS})

    async def _handle_post(self, request: CameraRequest) -> ServiceResponse:
        if request.query:
            logger.error("Camera Service: query string not allowed on capture")
            return ServiceResponse.error_status(400)

        if not request.body:
            logger.error("Camera Service: no body present")
            return ServiceResponse.error_status(400)

        try:
            body = json.loads(request.body)
        except (ValueError, UnicodeDecodeError) as e:
            logger.error(f"Camera Service: error deserializing POST body: {e}")
            return ServiceResponse.error_status(400)

        if not isinstance(body, dict):
            logger.error("Camera Service: invalid POST body")
            return ServiceResponse.error_status(400)

        try:
            options = CaptureOptions.model_validate(body)
        except ValidationError as e:
            logger.error(f"Camera Service: invalid capture options: {e.errors()}")
            return ServiceResponse.error_status(400)

        result = await self.capture_controller.start(options)
        return ServiceResponse.from_camera_response(result)

    async def _handle_get(self, request: CameraRequest) -> ServiceResponse:
        entity = request.entity
        result = await self.capture_controller.run_exclusive(lambda: self.list_entity(entity))
        return ServiceResponse.from_camera_response(result)

    async def _handle_delete(self, request: CameraRequest) -> ServiceResponse:
        entity = request.entity
        result = await self.capture_controller.run_exclusive(lambda: self.delete_entity(entity))
        return ServiceResponse.from_camera_response(result)

    def list_entity(self, entity: str) -> CameraResponse:
        """List cached files of an entity as comma-joined file URIs"""
        if entity not in self.ENTITIES:
            return CameraResponse.failure(ErrorMessages.UNKNOWN_ENTITY)

        kind, response_type = self.ENTITIES[entity]
        try:
            files = self.file_cache.list_files(kind)
        except (FileHandlingError, MaxCacheError) as e:
            return CameraResponse.failure(e.message)
        except OSError as e:
            return CameraResponse.failure(str(e))

        return CameraResponse.of(response_type, self.render_file_list(files))

    def delete_entity(self, entity: str) -> CameraResponse:
        """Delete all cached files of an entity"""
        if entity not in self.ENTITIES:
            return CameraResponse.failure(ErrorMessages.UNKNOWN_ENTITY_DELETE)

        kind, _ = self.ENTITIES[entity]
        try:
            self.file_cache.delete_all(kind)
        except (FileHandlingError, MaxCacheError) as e:
            return CameraResponse.failure(e.message)
        except OSError as e:
            return CameraResponse.failure(str(e))

        return CameraResponse.of(ResponseType.MESSAGE, ResponseMessages.FILES_DELETED)

    @staticmethod
    def render_file_list(files) -> str:
        if not files:
            return ResponseMessages.NO_FILES_YET
        return ",".join(path.resolve().as_uri() for path in files)
