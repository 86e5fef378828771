"""Host-side control of the bot lifecycle."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from botstudio.bot.manager import BotManager, BotState, ImageEditor, LogCallback
from botstudio.core.config import Settings, get_settings
from botstudio.core.errors import ConfigurationError
from botstudio.host.buffers import BotLogBuffer
from botstudio.host.credentials import CredentialStore, resolve_token

logger = logging.getLogger(__name__)

TOKEN_PROMPT_MESSAGE = "Please enter a Telegram Bot Token first!"

ManagerFactory = Callable[[str, LogCallback], BotManager]


class BotHost:
    """Owns at most one ``BotManager`` and the token it was built with."""

    def __init__(
        self,
        *,
        credentials: CredentialStore,
        logs: BotLogBuffer,
        settings: Settings | None = None,
        editor: ImageEditor | None = None,
        manager_factory: ManagerFactory | None = None,
    ) -> None:
        self._credentials = credentials
        self._logs = logs
        self._settings = settings or get_settings()
        self._editor = editor
        self._manager_factory = manager_factory or self._default_manager_factory
        self._manager: BotManager | None = None
        self._lock = asyncio.Lock()

    def _default_manager_factory(self, token: str, on_log: LogCallback) -> BotManager:
        return BotManager(token, on_log, editor=self._editor, settings=self._settings)

    @property
    def token(self) -> str:
        """Cached token, falling back to TELEGRAM_BOT_TOKEN when nothing is cached."""
        return resolve_token(self._credentials, self._settings.telegram_bot_token)

    def set_token(self, token: str) -> None:
        self._credentials.save(token.strip())

    @property
    def manager(self) -> BotManager | None:
        return self._manager

    @property
    def is_running(self) -> bool:
        return self._manager is not None and self._manager.is_running

    async def start(self) -> BotState:
        token = self.token.strip()
        if not token:
            raise ConfigurationError(TOKEN_PROMPT_MESSAGE)
        async with self._lock:
            manager = self._manager
            if manager is not None and manager.token != token:
                logger.info("Bot token changed; replacing the running bot")
                await manager.aclose()
                manager = None
            if manager is None:
                manager = self._manager_factory(token, self._logs.append)
                self._manager = manager
            await manager.start()
            return manager.state

    async def stop(self) -> BotState:
        async with self._lock:
            if self._manager is not None:
                await self._manager.stop()
        return BotState.STOPPED

    async def toggle(self) -> BotState:
        if self.is_running:
            return await self.stop()
        return await self.start()

    def status(self) -> dict[str, Any]:
        manager = self._manager
        return {
            "state": manager.state if manager is not None else BotState.STOPPED,
            "offset": manager.offset if manager is not None else 0,
            "token_configured": bool(self.token.strip()),
        }

    async def aclose(self) -> None:
        async with self._lock:
            if self._manager is not None:
                await self._manager.aclose()
            self._manager = None
