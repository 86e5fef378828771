from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from botstudio.core.errors import TelegramApiError
from botstudio.imaging.data_uri import DEFAULT_IMAGE_MIME_TYPE
from botstudio.telegram.schemas import TelegramFile, TelegramUpdate

LONG_POLL_TIMEOUT_MARGIN_SECONDS = 10


@dataclass(frozen=True)
class DownloadedFile:
    content: bytes
    content_type: str


class TelegramBotApi:
    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://api.telegram.org",
        parse_mode: str | None = "Markdown",
        poll_timeout_seconds: int = 30,
        request_timeout_seconds: float = 30.0,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.parse_mode = parse_mode
        self.poll_timeout_seconds = poll_timeout_seconds
        self.request_timeout_seconds = request_timeout_seconds

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.token}/{method}"

    def file_url(self, file_path: str) -> str:
        return f"{self.base_url}/file/bot{self.token}/{file_path.lstrip('/')}"

    @staticmethod
    def _validate_telegram_response(method: str, response: httpx.Response) -> Any:
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or not data.get("ok", False):
            raise TelegramApiError(method, data)
        return data.get("result")

    async def _get(self, method: str, params: dict, *, timeout: float) -> Any:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(self._method_url(method), params=params)
        return self._validate_telegram_response(method, response)

    async def _post(self, method: str, payload: dict) -> Any:
        async with httpx.AsyncClient(timeout=self.request_timeout_seconds) as client:
            response = await client.post(self._method_url(method), json=payload)
        return self._validate_telegram_response(method, response)

    async def _post_multipart(self, method: str, data: dict, files: dict) -> Any:
        async with httpx.AsyncClient(timeout=self.request_timeout_seconds) as client:
            response = await client.post(self._method_url(method), data=data, files=files)
        return self._validate_telegram_response(method, response)

    async def get_updates(self, offset: int) -> list[TelegramUpdate]:
        """Long-poll for updates at or after ``offset``."""
        result = await self._get(
            "getUpdates",
            {"offset": offset, "timeout": self.poll_timeout_seconds},
            timeout=self.poll_timeout_seconds + LONG_POLL_TIMEOUT_MARGIN_SECONDS,
        )
        if not isinstance(result, list):
            raise TelegramApiError("getUpdates", result)
        return [TelegramUpdate.model_validate(item) for item in result]

    async def get_file(self, file_id: str) -> TelegramFile:
        result = await self._get(
            "getFile",
            {"file_id": file_id},
            timeout=self.request_timeout_seconds,
        )
        return TelegramFile.model_validate(result)

    async def download_file(self, file_path: str) -> DownloadedFile:
        async with httpx.AsyncClient(timeout=self.request_timeout_seconds) as client:
            response = await client.get(self.file_url(file_path))
        response.raise_for_status()
        content_type = response.headers.get("content-type", "").split(";", 1)[0].strip()
        if not content_type.startswith("image/"):
            content_type = DEFAULT_IMAGE_MIME_TYPE
        return DownloadedFile(content=response.content, content_type=content_type)

    async def send_message(self, chat_id: str | int, text: str) -> None:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if self.parse_mode:
            payload["parse_mode"] = self.parse_mode
        await self._post("sendMessage", payload)

    async def send_photo(
        self,
        chat_id: str | int,
        photo: bytes,
        caption: str | None = None,
        *,
        filename: str = "edited.png",
        mime_type: str = "image/png",
    ) -> None:
        data: dict[str, str | int] = {"chat_id": str(chat_id)}
        if caption:
            data["caption"] = caption
            if self.parse_mode:
                data["parse_mode"] = self.parse_mode
        files = {"photo": (filename, photo, mime_type)}
        await self._post_multipart("sendPhoto", data=data, files=files)
