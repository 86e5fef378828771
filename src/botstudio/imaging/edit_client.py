"""Gemini image edit client."""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from botstudio.core.config import Settings, get_settings
from botstudio.core.errors import ConfigurationError
from botstudio.imaging.data_uri import RESULT_IMAGE_MIME_TYPE, split_data_uri, to_data_uri

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = "API Key is missing. Please ensure GEMINI_API_KEY is configured."

ClientFactory = Callable[[str], Any]


def _default_client_factory(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


@dataclass(frozen=True)
class EditResult:
    """Outcome of one edit call.

    ``image_url`` is always a PNG data URI when present. ``text`` carries the
    backend's explanation, or an empty string.
    """

    image_url: str | None
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.image_url is None and not self.text


class ImageEditClient:
    """Stateless wrapper around a single Gemini ``generate_content`` call."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or _default_client_factory

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    @property
    def model(self) -> str:
        return self.settings.gemini_image_model

    async def edit_image(self, image: str, instruction: str) -> EditResult:
        """Send ``image`` plus ``instruction`` to Gemini and map the reply.

        ``image`` may be a data URI or bare base64. Backend errors propagate
        unchanged; there is no retry.
        """
        api_key = self.settings.gemini_api_key.strip()
        if not api_key:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)

        inline_image = split_data_uri(image)
        contents = build_edit_contents(
            image_bytes=inline_image.to_bytes(),
            mime_type=inline_image.mime_type,
            instruction=instruction,
        )
        client = self._client_factory(api_key)
        try:
            response = await client.aio.models.generate_content(model=self.model, contents=contents)
        except Exception:
            logger.exception("Gemini edit request failed for model '%s'", self.model)
            raise
        return parse_edit_response(response)


def build_edit_contents(*, image_bytes: bytes, mime_type: str, instruction: str) -> types.Content:
    """Build the two-part user content: inline image first, instruction second."""
    return types.Content(
        role="user",
        parts=[
            types.Part(inline_data=types.Blob(mime_type=mime_type, data=image_bytes)),
            types.Part(text=instruction),
        ],
    )


def _first_candidate_parts(response: Any) -> list[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def _inline_payload(part: Any) -> str | None:
    inline_data = getattr(part, "inline_data", None)
    if inline_data is None:
        return None
    data = getattr(inline_data, "data", None)
    if not data:
        return None
    if isinstance(data, bytes):
        return base64.b64encode(data).decode("ascii")
    return str(data)


def parse_edit_response(response: Any) -> EditResult:
    """Keep the first inline image and the last text part of the first candidate."""
    image_url: str | None = None
    text = ""
    for part in _first_candidate_parts(response):
        payload = _inline_payload(part)
        if payload is not None:
            if image_url is None:
                image_url = to_data_uri(payload, RESULT_IMAGE_MIME_TYPE)
            continue
        part_text = getattr(part, "text", None)
        if part_text:
            text = part_text
    return EditResult(image_url=image_url, text=text)
