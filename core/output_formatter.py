"""
Output Formatter - Turns picked media into a camera response
"""

import logging

from api.exceptions import FileHandlingError, MaxCacheError
from core.constants import ErrorMessages
from core.enums import MediaType, OutputType, ResponseType
from core.file_cache import FileCacheManager
from core.image.converters import ImageConverters
from schemas.camera import CameraResponse

logger = logging.getLogger(__name__)


class OutputFormatter:
    """Returns media inline as base64 or as the location of a cached file"""

    def __init__(self, file_cache: FileCacheManager):
        self.file_cache = file_cache

    def resolve(self, output_type: OutputType, media_type: MediaType) -> ResponseType:
        """Response type for an output/media combination, ERROR if unsupported"""
        if output_type == OutputType.FILE_URI:
            if media_type == MediaType.PHOTO:
                return ResponseType.PHOTO_LOCATION
            if media_type == MediaType.VIDEO:
                return ResponseType.VIDEO_LOCATION
        elif output_type == OutputType.INLINE_SRC and media_type == MediaType.PHOTO:
            return ResponseType.PHOTO_SRC
        return ResponseType.ERROR

    def format(self, data: bytes, output_type: OutputType, media_type: MediaType) -> CameraResponse:
        """
        Build the response for picked media.

        Blocking: may write to disk. Run off the event loop.

        Args:
            data: Raw media bytes
            output_type: Requested output
            media_type: Kind of media actually picked

        Returns:
            CameraResponse with the media reference or an error
        """
        response_type = self.resolve(output_type, media_type)

        if response_type == ResponseType.PHOTO_SRC:
            logger.debug(f"Returning {len(data)} bytes inline")
            return CameraResponse.of(response_type, ImageConverters.to_base64(data))

        if response_type in (ResponseType.PHOTO_LOCATION, ResponseType.VIDEO_LOCATION):
            try:
                path = self.file_cache.save(data, media_type)
            except (FileHandlingError, MaxCacheError) as e:
                return CameraResponse.failure(e.message)
            return CameraResponse.of(response_type, str(path))

        logger.warning(
            f"Unsupported output {OutputType(output_type).name} "
            f"for {MediaType(media_type).name}"
        )
        return CameraResponse.failure(ErrorMessages.UNKNOWN_OUTPUT_FORMAT)
