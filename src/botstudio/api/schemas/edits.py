"""Image edit request and response contracts."""

from pydantic import BaseModel, Field, field_validator


class EditRequest(BaseModel):
    """Payload accepted by the edit endpoint."""

    image: str = Field(min_length=1)  # data URI or bare base64
    prompt: str = Field(min_length=1, max_length=8192)

    @field_validator("image", "prompt")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        """Whitespace-only image or prompt is treated as missing."""
        if not value.strip():
            raise ValueError("Please provide an image and instructions.")
        return value


class EditResponse(BaseModel):
    """Edit outcome; ``image_url`` is null when the backend returned no image."""

    image_url: str | None
    text: str
    history_id: str | None = None


class HistoryEntryResponse(BaseModel):
    id: str
    original_image: str
    edited_image: str
    prompt: str
    timestamp: int


class HistoryListResponse(BaseModel):
    items: list[HistoryEntryResponse]
    count: int
