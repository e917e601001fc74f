"""
Capture Controller - Single-flight state machine guarding the capture resource

Only one capture session may be in flight. A request arriving while a
session is active is rejected with the busy error, never queued.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional

from api.exceptions import CameraServiceException
from core.constants import ErrorMessages
from core.enums import CaptureState, SourceType
from core.media_picker import MediaPicker, PickerRequest
from core.output_formatter import OutputFormatter
from schemas.camera import CameraResponse, CaptureOptions

logger = logging.getLogger(__name__)


class CaptureController:
    """
    Owns the Idle/Processing state and the pending result of the active session.

    ``start`` and ``complete`` must run on the event loop thread. The
    check-and-set in ``start`` has no await point, so two requests can
    never both observe Idle.
    """

    def __init__(
        self,
        pickers: Dict[SourceType, MediaPicker],
        formatter: OutputFormatter,
        session_timeout_s: Optional[float] = None,
    ):
        """
        Initialize Capture Controller

        Args:
            pickers: Picker per source type
            formatter: Output formatter for picked media
            session_timeout_s: Seconds before a stalled session is abandoned, None to wait forever
        """
        self.pickers = dict(pickers)
        self.formatter = formatter
        self.session_timeout_s = session_timeout_s

        self._state = CaptureState.IDLE
        self._pending: Optional[asyncio.Future] = None
        self._options: Optional[CaptureOptions] = None
        self._task: Optional[asyncio.Task] = None

        logger.info(
            f"Capture Controller initialized with sources "
            f"{[s.name.lower() for s in self.pickers]}, timeout: {session_timeout_s}"
        )

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state == CaptureState.IDLE

    @property
    def options(self) -> Optional[CaptureOptions]:
        """Options of the in-flight session"""
        return self._options

    @staticmethod
    def busy_response() -> CameraResponse:
        return CameraResponse.failure(ErrorMessages.BUSY)

    def start(self, options: CaptureOptions) -> asyncio.Future:
        """
        Begin a capture session.

        Args:
            options: Validated capture options

        Returns:
            Future resolved with the session's CameraResponse. Already
            resolved with the busy error if a session is in flight.
        """
        loop = asyncio.get_running_loop()

        if not self.is_idle:
            logger.warning("Capture request rejected: already processing")
            rejected = loop.create_future()
            rejected.set_result(self.busy_response())
            return rejected

        self._state = CaptureState.PROCESSING
        self._options = options
        self._pending = loop.create_future()
        logger.info(
            f"Capture started: source={options.source_type.name.lower()}, "
            f"media={options.media_type.name.lower()}, output={options.output.name.lower()}"
        )

        self._task = loop.create_task(self._run_session(options))
        return self._pending

    def complete(self, result: CameraResponse) -> bool:
        """
        Finish the in-flight session and deliver its result.

        Returns:
            True if a session was completed, False if there was none
        """
        if self.is_idle or self._pending is None:
            logger.warning("complete() called with no session in flight, ignoring")
            return False

        pending = self._pending
        self._state = CaptureState.IDLE
        self._pending = None
        self._options = None
        self._task = None

        if result.is_error:
            logger.info(f"Capture finished with error: {result.error}")
        else:
            logger.info(f"Capture finished: {result.response_type.value}")

        if not pending.done():
            pending.set_result(result)
        return True

    async def run_exclusive(self, operation: Callable[[], CameraResponse]) -> CameraResponse:
        """
        Run a blocking operation in a worker thread under the busy flag.

        The flag is set before the first await, so a capture arriving while
        the operation runs is rejected.

        Returns:
            The operation's response, or the busy error if a session is in flight
        """
        if not self.is_idle:
            logger.warning("Request rejected: already processing")
            return self.busy_response()

        self._state = CaptureState.PROCESSING
        try:
            return await asyncio.to_thread(operation)
        finally:
            self._state = CaptureState.IDLE

    async def _run_session(self, options: CaptureOptions):
        """Drive one capture session and complete it exactly once"""
        try:
            result = await self._capture(options)
        except asyncio.CancelledError:
            # Only shutdown cancels the session task
            result = CameraResponse.failure(ErrorMessages.SESSION_CANCELLED)
        except CameraServiceException as e:
            result = CameraResponse.failure(e.message)
        except Exception as e:
            logger.error(f"Capture session failed: {e}", exc_info=True)
            result = CameraResponse.failure(str(e))

        self.complete(result)

    async def _capture(self, options: CaptureOptions) -> CameraResponse:
        picker = self.pickers.get(options.source_type)
        if picker is None or not await asyncio.to_thread(picker.is_available):
            logger.error(f"Source {options.source_type.name.lower()} not accessible")
            return CameraResponse.failure(ErrorMessages.CAMERA_NOT_ACCESSIBLE)

        request = PickerRequest(
            source_type=options.source_type,
            media_type=options.media_type,
            allows_editing=options.edit,
            compression=options.compression,
            camera_direction=options.camera_direction,
        )

        try:
            picked = await asyncio.wait_for(picker.pick(request), timeout=self.session_timeout_s)
        except asyncio.TimeoutError:
            logger.error(f"Capture session timed out after {self.session_timeout_s}s")
            return CameraResponse.failure(ErrorMessages.SESSION_TIMED_OUT)

        if picked is None:
            return CameraResponse.failure(ErrorMessages.USER_CANCELLED)

        # The picked kind overrides the requested one
        return await asyncio.to_thread(
            self.formatter.format, picked.data, options.output, picked.media_type
        )

    async def shutdown(self):
        """Cancel the in-flight session, completing it with the shutdown error"""
        task = self._task
        if task is None or task.done():
            return

        logger.info("Cancelling in-flight capture session")
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
