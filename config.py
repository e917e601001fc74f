"""
Configuration for the Camera Service.

Settings are grouped in sections and read from environment variables with
the ``CAMERA_`` prefix, using ``__`` for nested keys, e.g.::

    CAMERA_STORAGE__ROOT_DIR=/var/lib/camera
    CAMERA_CAPTURE__SESSION_TIMEOUT_S=60
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import CaptureConstants, StorageConstants, SystemConstants


class SystemSettings(BaseModel):
    """Process-wide settings"""

    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT
    debug: bool = False


class APISettings(BaseModel):
    """HTTP server settings"""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_enabled: bool = True
    cors_origins: List[str] = ["*"]


class StorageSettings(BaseModel):
    """File cache settings"""

    root_dir: Path = Path(StorageConstants.DEFAULT_ROOT_DIR)
    photo_dir_name: str = StorageConstants.PHOTO_DIR_NAME
    video_dir_name: str = StorageConstants.VIDEO_DIR_NAME
    file_prefix: str = StorageConstants.FILE_NAME_PREFIX
    max_photo_files: int = Field(StorageConstants.MAX_PHOTO_FILES, ge=1)
    max_video_files: int = Field(StorageConstants.MAX_VIDEO_FILES, ge=1)
    enforce_cache_limit: bool = True


class CaptureSettings(BaseModel):
    """Capture session settings"""

    session_timeout_s: Optional[float] = Field(
        CaptureConstants.DEFAULT_SESSION_TIMEOUT_S,
        gt=0,
        description="Seconds before a stalled picker is abandoned; None waits forever",
    )
    camera_devices: List[int] = Field(
        default_factory=lambda: list(CaptureConstants.DEFAULT_CAMERA_DEVICES),
        description="Capture device index per cameraDirection",
    )
    video_duration_s: float = Field(CaptureConstants.DEFAULT_VIDEO_DURATION_S, gt=0)
    video_fps: int = Field(CaptureConstants.DEFAULT_VIDEO_FPS, ge=1)


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_prefix="CAMERA_", env_nested_delimiter="__")

    environment: str = "development"
    system: SystemSettings = SystemSettings()
    api: APISettings = APISettings()
    storage: StorageSettings = StorageSettings()
    capture: CaptureSettings = CaptureSettings()

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary view, stored on app state"""
        return self.model_dump(mode="json")


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process"""
    return Settings()
