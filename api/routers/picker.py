"""
Picker API Router - Selections for library capture sessions

A capture from the photo library or saved album waits until the client UI
posts the chosen media here, or cancels.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_selection_picker
from api.exceptions import InvalidSelectionError, safe_endpoint
from core.constants import ErrorMessages, ResponseMessages
from core.enums import MediaType
from core.media_picker import SelectionPicker
from schemas.system import PendingSelection

logger = logging.getLogger(__name__)

router = APIRouter()


def media_type_for(content_type: str) -> MediaType:
    """Media kind from a Content-Type header"""
    main_type = content_type.split(";", 1)[0].strip().lower()
    if main_type.startswith("image/"):
        return MediaType.PHOTO
    if main_type.startswith("video/"):
        return MediaType.VIDEO
    raise InvalidSelectionError(
        ErrorMessages.UNSUPPORTED_CONTENT_TYPE.format(content_type=content_type or "none")
    )


@router.get("/pending")
@safe_endpoint
async def get_pending(picker: SelectionPicker = Depends(get_selection_picker)) -> PendingSelection:
    """Report whether a capture session is waiting for a selection"""
    pending_request = picker.pending_request
    if pending_request is None:
        return PendingSelection(pending=False)

    return PendingSelection(
        pending=True,
        source_type=pending_request.source_type,
        media_type=pending_request.media_type,
        allows_editing=pending_request.allows_editing,
    )


@router.post("/selection")
@safe_endpoint
async def submit_selection(
    request: Request, picker: SelectionPicker = Depends(get_selection_picker)
) -> dict:
    """Deliver the picked photo or video as the raw request body"""
    media_type = media_type_for(request.headers.get("content-type", ""))
    data = await request.body()

    picker.submit(data, media_type)

    return {"message": ResponseMessages.SELECTION_RECEIVED}


@router.post("/cancel")
@safe_endpoint
async def cancel_selection(picker: SelectionPicker = Depends(get_selection_picker)) -> dict:
    """Dismiss the picker without a selection"""
    picker.cancel()

    return {"message": ResponseMessages.SELECTION_CANCELLED}
