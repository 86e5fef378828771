from typing import Annotated

from fastapi import APIRouter, Depends, status

from botstudio.api.dependencies import get_bot_host, get_bot_logs
from botstudio.api.responses import BOT_TOKEN_MISSING, build_error_response
from botstudio.api.schemas.bot import (
    BotLogEntryResponse,
    BotLogListResponse,
    BotStatusResponse,
    BotTokenUpdateRequest,
)
from botstudio.api.schemas.errors import ErrorResponse
from botstudio.core.errors import ConfigurationError
from botstudio.host.bot_host import BotHost
from botstudio.host.buffers import BotLogBuffer

router = APIRouter(prefix="/v1/bot", tags=["bot"])
BotHostDep = Annotated[BotHost, Depends(get_bot_host)]
BotLogsDep = Annotated[BotLogBuffer, Depends(get_bot_logs)]

TOKEN_MISSING_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


def _token_missing_response(exc: ConfigurationError):
    return build_error_response(code=BOT_TOKEN_MISSING, message=str(exc))


@router.get("", response_model=BotStatusResponse)
def get_bot_status(bot_host: BotHostDep) -> BotStatusResponse:
    return BotStatusResponse.model_validate(bot_host.status())


@router.put("/token", response_model=BotStatusResponse)
def update_bot_token(payload: BotTokenUpdateRequest, bot_host: BotHostDep) -> BotStatusResponse:
    """Cache the bot token locally; takes effect on the next start."""
    bot_host.set_token(payload.token)
    return BotStatusResponse.model_validate(bot_host.status())


@router.post("/start", response_model=BotStatusResponse, responses=TOKEN_MISSING_RESPONSES)
async def start_bot(bot_host: BotHostDep):
    try:
        await bot_host.start()
    except ConfigurationError as exc:
        return _token_missing_response(exc)
    return BotStatusResponse.model_validate(bot_host.status())


@router.post("/stop", response_model=BotStatusResponse)
async def stop_bot(bot_host: BotHostDep) -> BotStatusResponse:
    await bot_host.stop()
    return BotStatusResponse.model_validate(bot_host.status())


@router.post("/toggle", response_model=BotStatusResponse, responses=TOKEN_MISSING_RESPONSES)
async def toggle_bot(bot_host: BotHostDep):
    try:
        await bot_host.toggle()
    except ConfigurationError as exc:
        return _token_missing_response(exc)
    return BotStatusResponse.model_validate(bot_host.status())


@router.get("/logs", response_model=BotLogListResponse)
def list_bot_logs(bot_logs: BotLogsDep) -> BotLogListResponse:
    """Return the most recent bot log lines, oldest first."""
    items = [
        BotLogEntryResponse(id=entry.id, message=entry.message, severity=entry.severity, time=entry.time)
        for entry in bot_logs.entries()
    ]
    return BotLogListResponse(items=items, count=len(items))
