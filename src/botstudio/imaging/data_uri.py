"""Helpers for moving images around as ``data:`` URIs."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
RESULT_IMAGE_MIME_TYPE = "image/png"

# data:[<mime>][;key=value]*;base64,
_DATA_URI_PREFIX = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w.+-]+=[^;,]*)*;base64,",
    re.IGNORECASE,
)


class InvalidImagePayloadError(ValueError):
    """The image payload is not valid standard base64."""


@dataclass(frozen=True)
class InlineImage:
    """Raw base64 payload split from its data-URI prefix."""

    data: str
    mime_type: str

    def to_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=True)
        except binascii.Error as exc:
            raise InvalidImagePayloadError(f"Image payload is not valid base64: {exc}") from exc


def split_data_uri(value: str, *, default_mime_type: str = DEFAULT_IMAGE_MIME_TYPE) -> InlineImage:
    """Strip an optional ``data:<mime>[;param=value];base64,`` prefix from an image payload.

    Bare base64 input is returned unchanged with ``default_mime_type``.
    """
    payload = value.strip()
    match = _DATA_URI_PREFIX.match(payload)
    if match is None:
        return InlineImage(data=payload, mime_type=default_mime_type)
    mime_type = (match.group("mime") or default_mime_type).lower()
    return InlineImage(data=payload[match.end():], mime_type=mime_type)


def to_data_uri(data: bytes | str, mime_type: str = RESULT_IMAGE_MIME_TYPE) -> str:
    """Wrap raw bytes (or an already base64-encoded string) as a data URI."""
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{data}"


def data_uri_to_bytes(value: str) -> bytes:
    return split_data_uri(value).to_bytes()
