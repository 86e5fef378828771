"""Local cache for the Telegram bot token."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "tg_bot_token"


class CredentialStore:
    """JSON file holding the bot token under a fixed key; survives restarts."""

    def __init__(self, path: Path | str, *, key: str = TOKEN_KEY) -> None:
        self.path = Path(path).expanduser()
        self.key = key

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable credential store at %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> str:
        value = self._read().get(self.key, "")
        return value if isinstance(value, str) else ""

    def save(self, token: str) -> None:
        data = self._read()
        data[self.key] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.warning("Could not restrict permissions on %s", self.path)


def resolve_token(store: CredentialStore, fallback: str = "") -> str:
    """Return the cached token, or ``fallback`` (TELEGRAM_BOT_TOKEN) when nothing is cached."""
    return (store.load() or fallback).strip()
