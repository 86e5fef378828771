"""In-memory stand-ins for the Telegram API and the image editor."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from botstudio.bot.manager import LogSeverity
from botstudio.imaging.edit_client import EditResult
from botstudio.telegram.client import DownloadedFile
from botstudio.telegram.schemas import TelegramFile, TelegramUpdate


def photo_update(
    update_id: int,
    *,
    chat_id: int = 42,
    caption: str | None = None,
    file_ids: tuple[str, ...] = ('small', 'medium', 'large'),
) -> dict:
    """Build a Telegram update carrying a photo in several resolutions."""
    message: dict = {
        'message_id': update_id,
        'chat': {'id': chat_id, 'type': 'private'},
        'photo': [
            {'file_id': file_id, 'file_unique_id': f'u-{file_id}', 'width': 90 * (i + 1), 'height': 90 * (i + 1)}
            for i, file_id in enumerate(file_ids)
        ],
    }
    if caption is not None:
        message['caption'] = caption
    return {'update_id': update_id, 'message': message}


def text_update(update_id: int, text: str, *, chat_id: int = 42) -> dict:
    return {
        'update_id': update_id,
        'message': {'message_id': update_id, 'chat': {'id': chat_id, 'type': 'private'}, 'text': text},
    }


class RecordingSleep:
    def __init__(self, events: list | None = None) -> None:
        self.calls: list[float] = []
        self._events = events

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._events is not None:
            self._events.append(('sleep', seconds))


class RecordingLog:
    def __init__(self) -> None:
        self.entries: list[tuple[str, LogSeverity]] = []

    def __call__(self, message: str, severity: LogSeverity) -> None:
        self.entries.append((message, severity))

    def messages(self, severity: LogSeverity | None = None) -> list[str]:
        return [message for message, level in self.entries if severity is None or level is severity]


class FakeChatApi:
    """Scripted Telegram API.

    ``batches`` items are either a list of raw update dicts or an exception to
    raise from ``get_updates``. Once exhausted, ``on_exhausted`` is awaited and
    an empty batch is returned.
    """

    def __init__(self, batches: list | None = None) -> None:
        self.batches = list(batches or [])
        self.on_exhausted: Callable[[], Awaitable[None]] | None = None
        self.events: list[tuple] = []
        self.offsets: list[int] = []
        self.file_requests: list[str] = []
        self.downloads: list[str] = []
        self.sent_messages: list[tuple[int, str]] = []
        self.sent_photos: list[tuple[int, bytes, str | None]] = []
        self.telegram_file = TelegramFile(file_id='large', file_path='photos/file_7.jpg')
        self.download = DownloadedFile(content=b'jpeg-bytes', content_type='image/jpeg')
        self.send_message_exc: Exception | None = None
        self.send_photo_exc: Exception | None = None
        self.get_file_exc: Exception | None = None
        self.download_exc: Exception | None = None
        self.poll_gate: asyncio.Event | None = None
        self.poll_entered = asyncio.Event()
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_updates(self, offset: int) -> list[TelegramUpdate]:
        self.offsets.append(offset)
        self.events.append(('poll', offset))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.poll_entered.set()
            gate = self.poll_gate
            if gate is not None:
                self.poll_gate = None
                await gate.wait()
            await asyncio.sleep(0)
            if not self.batches:
                if self.on_exhausted is not None:
                    await self.on_exhausted()
                return []
            item = self.batches.pop(0)
            if isinstance(item, Exception):
                raise item
            return [TelegramUpdate.model_validate(raw) for raw in item]
        finally:
            self.in_flight -= 1

    async def get_file(self, file_id: str) -> TelegramFile:
        self.file_requests.append(file_id)
        if self.get_file_exc is not None:
            raise self.get_file_exc
        return self.telegram_file

    async def download_file(self, file_path: str) -> DownloadedFile:
        self.downloads.append(file_path)
        if self.download_exc is not None:
            raise self.download_exc
        return self.download

    async def send_message(self, chat_id: int, text: str) -> None:
        self.events.append(('message', chat_id, text))
        if self.send_message_exc is not None:
            raise self.send_message_exc
        self.sent_messages.append((chat_id, text))

    async def send_photo(self, chat_id: int, photo: bytes, caption: str | None = None) -> None:
        self.events.append(('photo', chat_id, caption))
        if self.send_photo_exc is not None:
            raise self.send_photo_exc
        self.sent_photos.append((chat_id, photo, caption))


class FakeEditor:
    def __init__(self, result: EditResult | None = None, exc: Exception | None = None) -> None:
        self.result = result or EditResult(image_url='data:image/png;base64,ZWRpdGVk', text='')
        self.exc = exc
        self.calls: list[tuple[str, str]] = []

    async def edit_image(self, image: str, instruction: str) -> EditResult:
        self.calls.append((image, instruction))
        if self.exc is not None:
            raise self.exc
        return self.result
