"""Telegram long-polling loop bridging photo messages to the image editor."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from botstudio.bot import messages
from botstudio.core.config import Settings, get_settings
from botstudio.core.errors import ConfigurationError, TelegramApiError
from botstudio.core.observability import log_bot_event, redact_bot_tokens
from botstudio.imaging.data_uri import data_uri_to_bytes, to_data_uri
from botstudio.imaging.edit_client import EditResult, ImageEditClient
from botstudio.telegram.client import DownloadedFile, TelegramBotApi
from botstudio.telegram.schemas import TelegramFile, TelegramPhotoSize, TelegramUpdate

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Telegram bot token is required to start the bot."


class BotState(str, Enum):
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


class LogSeverity(str, Enum):
    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"


LogCallback = Callable[[str, LogSeverity], None]
SleepFunc = Callable[[float], Awaitable[None]]


class ChatApi(Protocol):
    """Subset of the Telegram Bot API the manager depends on."""

    async def get_updates(self, offset: int) -> list[TelegramUpdate]: ...

    async def get_file(self, file_id: str) -> TelegramFile: ...

    async def download_file(self, file_path: str) -> DownloadedFile: ...

    async def send_message(self, chat_id: int, text: str) -> None: ...

    async def send_photo(self, chat_id: int, photo: bytes, caption: str | None = None) -> None: ...


class ImageEditor(Protocol):
    """Anything that can turn an image plus an instruction into an edit result."""

    async def edit_image(self, image: str, instruction: str) -> EditResult: ...


class BotManager:
    """Single-instance polling bot with an explicit STOPPED/RUNNING state.

    The loop checks the state at the top of every iteration; ``stop()`` never
    interrupts a request that is already in flight. Updates are handled one at
    a time in arrival order. The cursor moves past an update before its handler
    runs, and the handler is awaited before the next update is touched.
    """

    def __init__(
        self,
        token: str,
        on_log: LogCallback | None = None,
        *,
        api: ChatApi | None = None,
        editor: ImageEditor | None = None,
        settings: Settings | None = None,
        retry_delay_seconds: float | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        settings = settings or get_settings()
        if retry_delay_seconds is None:
            retry_delay_seconds = settings.telegram_retry_delay_seconds
        if retry_delay_seconds <= 0:
            raise ValueError("retry_delay_seconds must be > 0")

        self._token = token
        self._on_log = on_log
        self._api: ChatApi = api or TelegramBotApi(
            token,
            base_url=settings.telegram_api_base_url,
            parse_mode=settings.telegram_parse_mode or None,
            poll_timeout_seconds=settings.telegram_poll_timeout_seconds,
            request_timeout_seconds=settings.telegram_request_timeout_seconds,
        )
        self._editor: ImageEditor = editor or ImageEditClient(settings)
        self._retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep
        self._state = BotState.STOPPED
        self._offset = 0
        self._runner_task: asyncio.Task[None] | None = None

    @property
    def token(self) -> str:
        return self._token

    @property
    def state(self) -> BotState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is BotState.RUNNING

    @property
    def offset(self) -> int:
        """Next ``update_id`` to request; never decreases."""
        return self._offset

    async def start(self) -> None:
        """Enter RUNNING and launch the poll loop unless one is already alive."""
        if not self._token.strip():
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)
        if self._state is BotState.RUNNING:
            return

        self._state = BotState.RUNNING
        self._emit(messages.BOT_STARTED_LOG, LogSeverity.INFO)
        log_bot_event(logger, "started", offset=self._offset)
        # A loop left over from a recent stop() is still waiting on its last
        # poll; it sees RUNNING again at the top of its next iteration.
        if self._runner_task is None or self._runner_task.done():
            self._runner_task = asyncio.create_task(self.run(), name="botstudio-telegram-poller")

    async def stop(self) -> None:
        """Enter STOPPED; the loop exits once its in-flight poll returns."""
        if self._state is BotState.STOPPED:
            return

        self._state = BotState.STOPPED
        self._emit(messages.BOT_STOPPED_LOG, LogSeverity.INFO)
        log_bot_event(logger, "stopped", offset=self._offset)

    async def join(self) -> None:
        """Wait for the poll loop task to exit."""
        task = self._runner_task
        if task is None:
            return
        await task
        if self._runner_task is task:
            self._runner_task = None

    async def aclose(self) -> None:
        """Stop and cancel the in-flight request; used when the host shuts down."""
        await self.stop()
        task = self._runner_task
        self._runner_task = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def run(self) -> None:
        """Poll until the state is observed STOPPED at the top of an iteration."""
        while self._state is BotState.RUNNING:
            await self.poll_once()

    async def poll_once(self) -> int:
        """Fetch one batch of updates and handle it; return the batch size."""
        try:
            updates = await self._api.get_updates(self._offset)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Telegram polling failed at offset=%s", self._offset)
            self._emit(messages.POLLING_ERROR_LOG.format(error=exc), LogSeverity.ERROR)
            if self._state is BotState.RUNNING:
                await self._sleep(self._retry_delay_seconds)
            return 0

        for update in updates:
            self._offset = max(self._offset, update.update_id + 1)
            await self._dispatch(update)
        return len(updates)

    async def _dispatch(self, update: TelegramUpdate) -> None:
        try:
            await self.handle_update(update)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Failed to handle update_id=%s", update.update_id)
            self._emit(messages.PIPELINE_ERROR_LOG.format(error=exc), LogSeverity.ERROR)

    async def handle_update(self, update: TelegramUpdate) -> None:
        """Route one update by message shape."""
        message = update.message
        if message is None:
            return

        chat_id = message.chat.id
        if _is_start_command(message.text):
            await self._api.send_message(chat_id, messages.WELCOME_TEXT)
            return

        photo = message.largest_photo
        if photo is not None and message.caption:
            self._emit(messages.IMAGE_RECEIVED_LOG.format(chat_id=chat_id), LogSeverity.INFO)
            log_bot_event(logger, "update.photo_received", update_id=update.update_id, chat_id=chat_id)
            await self.process_image(chat_id, photo, message.caption)
        elif photo is not None:
            await self._api.send_message(chat_id, messages.CAPTION_REQUIRED_TEXT)

    async def process_image(self, chat_id: int, photo: TelegramPhotoSize, prompt: str) -> None:
        """Download ``photo``, edit it, and reply with the result.

        Any failure along the way is logged and answered with one failure
        notice; nothing is raised to the poll loop.
        """
        try:
            self._emit(messages.DOWNLOADING_LOG, LogSeverity.INFO)
            telegram_file = await self._api.get_file(photo.file_id)
            if not telegram_file.file_path:
                raise TelegramApiError("getFile", "Could not get file path")
            downloaded = await self._api.download_file(telegram_file.file_path)
            image = to_data_uri(downloaded.content, downloaded.content_type)

            self._emit(messages.SENDING_TO_GEMINI_LOG.format(prompt=prompt), LogSeverity.INFO)
            result = await self._editor.edit_image(image, prompt)

            if result.image_url:
                self._emit(messages.GEMINI_SUCCESS_LOG, LogSeverity.SUCCESS)
                await self._api.send_photo(
                    chat_id,
                    data_uri_to_bytes(result.image_url),
                    messages.EDIT_COMPLETE_CAPTION,
                )
                log_bot_event(logger, "edit.delivered", chat_id=chat_id)
            else:
                log_bot_event(logger, "edit.no_image", chat_id=chat_id, text=result.text)
                await self._api.send_message(chat_id, messages.NO_IMAGE_TEXT)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Image pipeline failed for chat_id=%s", chat_id)
            self._emit(messages.PIPELINE_ERROR_LOG.format(error=exc), LogSeverity.ERROR)
            await self._send_failure_notice(chat_id)

    async def _send_failure_notice(self, chat_id: int) -> None:
        try:
            await self._api.send_message(chat_id, messages.FAILURE_TEXT)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Failed to send failure notice to chat_id=%s", chat_id)

    def _emit(self, message: str, severity: LogSeverity) -> None:
        # Error text from the Bot API client can carry request URLs.
        message = redact_bot_tokens(message)
        if severity is not LogSeverity.ERROR:
            logger.info("%s", message)
        if self._on_log is None:
            return
        try:
            self._on_log(message, severity)
        except Exception:
            logger.exception("Bot log callback failed")


def _is_start_command(text: str | None) -> bool:
    stripped = (text or "").strip()
    if not stripped:
        return False
    command = stripped.split(maxsplit=1)[0]
    # Group chats address commands as /start@BotName.
    return command.split("@", 1)[0] == messages.START_COMMAND
