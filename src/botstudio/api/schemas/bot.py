"""Bot control request and response contracts."""

from pydantic import BaseModel, Field

from botstudio.bot.manager import BotState, LogSeverity


class BotTokenUpdateRequest(BaseModel):
    """Payload accepted by the token endpoint; an empty token clears the cache."""

    token: str = Field(default="", max_length=256)


class BotStatusResponse(BaseModel):
    state: BotState
    offset: int
    token_configured: bool


class BotLogEntryResponse(BaseModel):
    id: str
    message: str
    severity: LogSeverity
    time: str


class BotLogListResponse(BaseModel):
    items: list[BotLogEntryResponse]
    count: int
