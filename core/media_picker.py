"""
Media Pickers - Sources of media for capture sessions

A picker stands in for the platform camera/gallery UI. It is asked for one
piece of media and either returns it or reports that the user cancelled.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from api.exceptions import InvalidSelectionError, NoPendingSelectionError
from core.constants import ErrorMessages
from core.enums import MediaType, SourceType
from core.image.converters import ImageConverters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickerRequest:
    """What a capture session asks the picker for"""

    source_type: SourceType
    media_type: MediaType
    allows_editing: bool = False
    compression: int = 0
    camera_direction: int = 0


@dataclass(frozen=True)
class PickedMedia:
    """Media returned by a picker, with the kind actually picked"""

    data: bytes
    media_type: MediaType


class MediaPicker(ABC):
    """Base picker class"""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the picker can present media right now."""

    @abstractmethod
    async def pick(self, request: PickerRequest) -> Optional[PickedMedia]:
        """
        Present the picker and wait for the user.

        Returns:
            Picked media, or None if the user cancelled
        """


class SelectionPicker(MediaPicker):
    """
    Picker for library sources.

    The session waits until the client UI submits a selection or cancels.
    Only one selection can be pending at a time.
    """

    def __init__(self):
        self._pending: Optional[asyncio.Future] = None
        self._request: Optional[PickerRequest] = None

    def is_available(self) -> bool:
        return True

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def pending_request(self) -> Optional[PickerRequest]:
        return self._request if self.pending else None

    async def pick(self, request: PickerRequest) -> Optional[PickedMedia]:
        if self.pending:
            raise RuntimeError("A selection is already pending")

        self._pending = asyncio.get_running_loop().create_future()
        self._request = request
        logger.info(
            f"Waiting for {request.media_type.name.lower()} selection "
            f"from {request.source_type.name.lower()}"
        )

        try:
            picked = await self._pending
        finally:
            self._pending = None
            self._request = None

        if picked is None:
            return None

        if picked.media_type == MediaType.PHOTO:
            # Photos are normalized to JPEG at the requested compression
            data = await asyncio.to_thread(ImageConverters.to_jpeg, picked.data, request.compression)
            return PickedMedia(data=data, media_type=MediaType.PHOTO)

        return picked

    def submit(self, data: bytes, media_type: MediaType):
        """
        Deliver the user's selection to the waiting session.

        Raises:
            NoPendingSelectionError: If no session is waiting
            InvalidSelectionError: If the selection is empty
        """
        if not self.pending:
            raise NoPendingSelectionError()
        if not data:
            raise InvalidSelectionError(ErrorMessages.EMPTY_SELECTION)

        logger.info(f"Selection received: {MediaType(media_type).name.lower()}, {len(data)} bytes")
        self._pending.set_result(PickedMedia(data=data, media_type=MediaType(media_type)))

    def cancel(self):
        """
        Report that the user dismissed the picker.

        Raises:
            NoPendingSelectionError: If no session is waiting
        """
        if not self.pending:
            raise NoPendingSelectionError()

        logger.info("Selection cancelled by user")
        self._pending.set_result(None)
