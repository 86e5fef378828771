import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from botstudio.api.dependencies import get_edit_client, get_history
from botstudio.api.responses import GEMINI_NOT_CONFIGURED, IMAGE_EDIT_FAILED, build_error_response
from botstudio.api.schemas.edits import (
    EditRequest,
    EditResponse,
    HistoryEntryResponse,
    HistoryListResponse,
)
from botstudio.api.schemas.errors import ErrorResponse
from botstudio.bot.manager import ImageEditor
from botstudio.core.errors import ConfigurationError
from botstudio.core.observability import log_event
from botstudio.host.buffers import HistoryStore

router = APIRouter(prefix="/v1", tags=["edits"])
EditClientDep = Annotated[ImageEditor, Depends(get_edit_client)]
HistoryDep = Annotated[HistoryStore, Depends(get_history)]
logger = logging.getLogger(__name__)

NO_IMAGE_FALLBACK_TEXT = "No image was returned. Try a different prompt."
UNEXPECTED_ERROR_TEXT = "An unexpected error occurred."


@router.post(
    "/edits",
    response_model=EditResponse,
    responses={
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def create_edit(payload: EditRequest, edit_client: EditClientDep, history: HistoryDep):
    """Edit one uploaded image and record successful results in history."""
    try:
        result = await edit_client.edit_image(payload.image, payload.prompt)
    except ConfigurationError as exc:
        return build_error_response(code=GEMINI_NOT_CONFIGURED, message=str(exc))
    except Exception as exc:
        logger.exception("Image edit failed")
        return build_error_response(code=IMAGE_EDIT_FAILED, message=str(exc) or UNEXPECTED_ERROR_TEXT)

    if not result.image_url:
        log_event(logger, event="edit.no_image", has_text=bool(result.text))
        return EditResponse(image_url=None, text=result.text or NO_IMAGE_FALLBACK_TEXT)

    entry = history.record(
        original_image=payload.image,
        edited_image=result.image_url,
        prompt=payload.prompt,
    )
    log_event(logger, event="edit.completed", history_id=entry.id, history_size=len(history))
    return EditResponse(image_url=result.image_url, text=result.text, history_id=entry.id)


@router.get("/history", response_model=HistoryListResponse)
def list_history(history: HistoryDep) -> HistoryListResponse:
    """Return the most recent successful edits, newest first."""
    items = [
        HistoryEntryResponse(
            id=entry.id,
            original_image=entry.original_image,
            edited_image=entry.edited_image,
            prompt=entry.prompt,
            timestamp=entry.timestamp,
        )
        for entry in history.entries()
    ]
    return HistoryListResponse(items=items, count=len(items))
