import logging
import logging.config

from botstudio.core.observability import redact_bot_tokens

_ALLOWED_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class TokenRedactionFilter(logging.Filter):
    """Strip Telegram bot tokens from records before any handler writes them.

    Bot API URLs embed the token, so httpx errors and tracebacks carry it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_bot_tokens(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact_bot_tokens(record.exc_text)
        return True


def configure_logging(level: str) -> None:
    """Configure process-wide logging for the studio host and the bot runner."""
    normalized_level = level.upper()
    if normalized_level not in _ALLOWED_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LEVELS))
        raise ValueError(f"Invalid LOG_LEVEL '{level}'. Expected one of: {allowed}")

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "redact_bot_tokens": {"()": "botstudio.core.logging.TokenRedactionFilter"},
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["redact_bot_tokens"],
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                # Request lines include the bot token in the URL path.
                "httpx": {"level": "WARNING"},
            },
            "root": {
                "level": normalized_level,
                "handlers": ["console"],
            },
        }
    )
