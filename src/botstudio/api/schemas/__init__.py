"""API schema models."""

from .bot import BotLogEntryResponse, BotLogListResponse, BotStatusResponse, BotTokenUpdateRequest
from .edits import EditRequest, EditResponse, HistoryEntryResponse, HistoryListResponse
from .errors import ErrorDetail, ErrorResponse

__all__ = [
    "BotLogEntryResponse",
    "BotLogListResponse",
    "BotStatusResponse",
    "BotTokenUpdateRequest",
    "EditRequest",
    "EditResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HistoryEntryResponse",
    "HistoryListResponse",
]
