"""
Enumerations shared across the Camera Service.

Numeric values match the option codes sent by the JavaScript client.
"""

from enum import Enum, IntEnum


class SourceType(IntEnum):
    """Where the media comes from"""

    PHOTO_LIBRARY = 0
    CAMERA = 1
    SAVED_ALBUM = 2


class MediaType(IntEnum):
    """Kind of media requested or picked"""

    PHOTO = 0
    VIDEO = 1


class OutputType(IntEnum):
    """How captured media is returned"""

    FILE_URI = 0
    INLINE_SRC = 1


class CaptureState(str, Enum):
    """State of the capture controller"""

    IDLE = "idle"
    PROCESSING = "processing"


class ResponseType(str, Enum):
    """Envelope key of a camera response"""

    PHOTO_SRC = "image_src"
    PHOTO_LOCATION = "image_location"
    VIDEO_SRC = "video_src"
    VIDEO_LOCATION = "video_location"
    MESSAGE = "message"
    ERROR = "error"
