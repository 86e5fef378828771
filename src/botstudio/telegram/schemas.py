"""Telegram Bot API payload contracts used by the polling bot."""

from pydantic import BaseModel, ConfigDict, Field


class TelegramChat(BaseModel):
    """Subset of Telegram chat data required to reply."""

    model_config = ConfigDict(extra="ignore")

    id: int


class TelegramPhotoSize(BaseModel):
    """One resolution variant of a sent photo."""

    model_config = ConfigDict(extra="ignore")

    file_id: str
    file_unique_id: str | None = None
    width: int | None = None
    height: int | None = None
    file_size: int | None = None


class TelegramMessage(BaseModel):
    """Subset of Telegram message data the dispatcher routes on."""

    model_config = ConfigDict(extra="ignore")

    message_id: int | None = None
    chat: TelegramChat
    text: str | None = None
    caption: str | None = None
    # Telegram orders variants smallest to largest.
    photo: list[TelegramPhotoSize] = Field(default_factory=list)

    @property
    def largest_photo(self) -> TelegramPhotoSize | None:
        return self.photo[-1] if self.photo else None


class TelegramUpdate(BaseModel):
    """Top-level Telegram update."""

    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: TelegramMessage | None = None


class TelegramFile(BaseModel):
    """Result of ``getFile``; ``file_path`` is absent once the link expires."""

    model_config = ConfigDict(extra="ignore")

    file_id: str
    file_unique_id: str | None = None
    file_size: int | None = None
    file_path: str | None = None
