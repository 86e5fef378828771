"""Gemini-backed image editing studio with a Telegram bot front end."""

__version__ = "0.1.0"
