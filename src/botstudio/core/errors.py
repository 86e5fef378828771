"""Error types shared by the edit client, the chat client, and the bot."""

from __future__ import annotations

from typing import Any


class ConfigurationError(RuntimeError):
    """A required credential or setting is missing at call time."""


class TelegramApiError(RuntimeError):
    """Telegram answered a Bot API call with ``ok: false``."""

    def __init__(self, method: str, payload: Any) -> None:
        super().__init__(f"Telegram {method} failed: {payload}")
        self.method = method
        self.payload = payload
