"""
Camera-related models.

This module contains request and response models for camera operations:
- Capture options sent with a capture request
- The single-key JSON response envelope
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from core.constants import CaptureConstants
from core.enums import MediaType, OutputType, ResponseType, SourceType


class CaptureOptions(BaseModel):
    """Options of a capture request"""

    class Config:
        extra = "forbid"
        populate_by_name = True
        frozen = True

    compression: int = Field(
        0,
        ge=CaptureConstants.MIN_COMPRESSION,
        le=CaptureConstants.MAX_COMPRESSION,
        description="JPEG quality used when encoding photos (0-100)",
    )
    source_type: SourceType = Field(
        SourceType.PHOTO_LIBRARY,
        alias="sourceType",
        description="0: photo library, 1: camera, 2: saved album",
    )
    media_type: MediaType = Field(
        MediaType.PHOTO, alias="mediaType", description="0: photo, 1: video"
    )
    edit: bool = Field(False, description="Allow editing in the picker")
    output: OutputType = Field(
        OutputType.FILE_URI, description="0: saved file location, 1: inline base64"
    )
    camera_direction: int = Field(
        0, ge=0, alias="cameraDirection", description="Index of the capture device"
    )


class CameraResponse(BaseModel):
    """
    Response envelope carrying exactly one key.

    Serializes compactly without unset keys, e.g. ``{"error":"User cancelled"}``.
    """

    class Config:
        extra = "forbid"

    image_src: Optional[str] = None
    image_location: Optional[str] = None
    video_src: Optional[str] = None
    video_location: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_single_key(self) -> "CameraResponse":
        keys = [k for k, v in self.__dict__.items() if v is not None]
        if len(keys) != 1:
            raise ValueError(f"Response must carry exactly one key, got {keys or 'none'}")
        return self

    @classmethod
    def of(cls, response_type: ResponseType, value: str) -> "CameraResponse":
        return cls(**{ResponseType(response_type).value: value})

    @classmethod
    def failure(cls, message: str) -> "CameraResponse":
        return cls(error=message)

    @property
    def response_type(self) -> ResponseType:
        for response_type in ResponseType:
            if getattr(self, response_type.value) is not None:
                return response_type
        raise ValueError("Empty response")

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")
