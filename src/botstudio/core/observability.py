"""Structured event logging shared by the HTTP host and the bot loop."""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any

REDACTED = "<redacted>"
BOT_EVENT_PREFIX = "bot."

# Telegram tokens look like "<bot id>:<secret>" and appear in Bot API URLs as "/bot<token>/".
_BOT_TOKEN_PATTERN = re.compile(r"(?P<prefix>\bbot)?\d{5,}:[A-Za-z0-9_-]{20,}")
_DATA_URI_PATTERN = re.compile(r"^data:(?P<head>[^,]*),(?P<body>.*)$", re.DOTALL)
_SECRET_FIELDS = frozenset({"token", "api_key"})
_MAX_TEXT_LENGTH = 200


def redact_bot_tokens(text: str) -> str:
    """Replace every Telegram bot token in ``text`` with a placeholder."""
    return _BOT_TOKEN_PATTERN.sub(lambda match: (match.group("prefix") or "") + REDACTED, text)


def _normalize_text(value: str) -> str:
    data_uri = _DATA_URI_PATTERN.match(value)
    if data_uri is not None:
        return f"data:{data_uri.group('head')},<{len(data_uri.group('body'))} chars>"
    value = redact_bot_tokens(value)
    if len(value) > _MAX_TEXT_LENGTH:
        return value[:_MAX_TEXT_LENGTH] + "..."
    return value


def _normalize_field_value(value: Any) -> Any:
    """Convert runtime values into JSON-safe primitives for logs."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, str):
        return _normalize_text(value)
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    if isinstance(value, dict):
        return {str(k): _normalize_field_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_field_value(item) for item in value]
    return _normalize_text(str(value))


def log_event(
    logger: logging.Logger,
    *,
    event: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit one ``event=<name> fields=<json>`` record.

    Secret fields are masked, bot tokens inside strings are redacted and
    data URIs are logged by size only.
    """
    normalized_fields = {
        key: REDACTED if key in _SECRET_FIELDS else _normalize_field_value(value)
        for key, value in sorted(fields.items())
    }
    logger.log(
        level,
        "event=%s fields=%s",
        event,
        json.dumps(normalized_fields, sort_keys=True, separators=(",", ":")),
    )


def log_bot_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a bot lifecycle or pipeline event under the ``bot.`` namespace."""
    log_event(logger, event=BOT_EVENT_PREFIX + event, level=level, **fields)
