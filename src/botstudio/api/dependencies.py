"""Shared FastAPI dependencies."""

from fastapi import Request

from botstudio.bot.manager import ImageEditor
from botstudio.host.bot_host import BotHost
from botstudio.host.buffers import BotLogBuffer, HistoryStore


def get_edit_client(request: Request) -> ImageEditor:
    """Return the initialized image edit client from app state."""
    edit_client: ImageEditor | None = getattr(request.app.state, "edit_client", None)
    if edit_client is None:
        raise RuntimeError("Image edit client is not initialized")
    return edit_client


def get_history(request: Request) -> HistoryStore:
    """Return the initialized edit history from app state."""
    history: HistoryStore | None = getattr(request.app.state, "history", None)
    if history is None:
        raise RuntimeError("Edit history is not initialized")
    return history


def get_bot_host(request: Request) -> BotHost:
    """Return the initialized bot host from app state."""
    bot_host: BotHost | None = getattr(request.app.state, "bot_host", None)
    if bot_host is None:
        raise RuntimeError("Bot host is not initialized")
    return bot_host


def get_bot_logs(request: Request) -> BotLogBuffer:
    """Return the initialized bot log buffer from app state."""
    bot_logs: BotLogBuffer | None = getattr(request.app.state, "bot_logs", None)
    if bot_logs is None:
        raise RuntimeError("Bot log buffer is not initialized")
    return bot_logs
