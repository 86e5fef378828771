"""Telegram Bot API access."""

from botstudio.telegram.client import DownloadedFile, TelegramBotApi
from botstudio.telegram.schemas import TelegramFile, TelegramMessage, TelegramPhotoSize, TelegramUpdate

__all__ = [
    "DownloadedFile",
    "TelegramBotApi",
    "TelegramFile",
    "TelegramMessage",
    "TelegramPhotoSize",
    "TelegramUpdate",
]
