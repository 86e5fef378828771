"""Telegram long-polling bot runtime primitives."""

from botstudio.bot.manager import BotManager, BotState, LogSeverity

__all__ = [
    "BotManager",
    "BotState",
    "LogSeverity",
]
