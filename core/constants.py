"""
Constants and configuration values for the Camera Service.
Centralizes all magic numbers and message strings.
"""


# Storage Constants
class StorageConstants:
    """Constants related to the on-disk media cache."""

    DEFAULT_ROOT_DIR = "./data/camera"
    PHOTO_DIR_NAME = "image"
    VIDEO_DIR_NAME = "video"
    FILE_NAME_PREFIX = "PM_CAMERA_"

    PHOTO_EXTENSION = "jpeg"
    VIDEO_EXTENSION = "mov"

    # Cache limits per media kind
    MAX_PHOTO_FILES = 100
    MAX_VIDEO_FILES = 20

    TEMP_FILE_SUFFIX = ".part"


# Capture Constants
class CaptureConstants:
    """Constants related to capture sessions."""

    DEFAULT_SESSION_TIMEOUT_S = 300.0
    DEFAULT_CAMERA_DEVICES = (0, 1)  # rear, front

    # Video recording
    DEFAULT_VIDEO_DURATION_S = 10.0
    DEFAULT_VIDEO_FPS = 30
    VIDEO_FOURCC = "mp4v"

    # Compression maps directly to JPEG quality
    MIN_COMPRESSION = 0
    MAX_COMPRESSION = 100

    # Frames discarded while the sensor settles
    WARMUP_FRAMES = 3


# API Constants
class APIConstants:
    """Constants for the pseudo-HTTP surface."""

    ALLOWED_METHODS = "POST, DELETE, GET"
    JSON_MEDIA_TYPE = "application/json"

    # Base64 output for inline images
    BASE64_LINE_LENGTH = 64
    BASE64_LINE_SEPARATOR = "\r\n"


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Error Messages
class ErrorMessages:
    """Error strings returned in the ``error`` key of a response."""

    BUSY = "Already processing a request, Please try again."
    USER_CANCELLED = "User cancelled"
    CAMERA_NOT_ACCESSIBLE = "Camera not accessible"
    SESSION_TIMED_OUT = "Capture session timed out"
    SESSION_CANCELLED = "Capture cancelled: service shutting down"
    UNKNOWN_OUTPUT_FORMAT = "Unknown output format!"

    # Cache errors
    MAX_CACHE_REACHED = "Max limit of storage reached. Try deleting few files first."
    NO_FILE_CACHED = "No file cached!"
    SAVE_FAILED = "Error in saving file!"
    NOT_A_DIRECTORY = "Cache path exists but is not a directory: {path}"

    # Entity errors
    UNKNOWN_ENTITY = "Unknown source type option!"
    UNKNOWN_ENTITY_DELETE = "Unknown source type option in file delete!"

    # Selection picker errors
    NO_PENDING_SELECTION = "No selection is pending"
    UNSUPPORTED_CONTENT_TYPE = "Unsupported content type: {content_type}"
    EMPTY_SELECTION = "Selection body is empty"


# Response Messages
class ResponseMessages:
    """Non-error strings returned in responses."""

    FILES_DELETED = "Files deleted successfully"
    NO_FILES_YET = "No files yet..."
    SELECTION_RECEIVED = "Selection received"
    SELECTION_CANCELLED = "Selection cancelled"
