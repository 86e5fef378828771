from __future__ import annotations

import asyncio
import logging
import signal

from botstudio.bot.manager import BotManager
from botstudio.core.config import get_settings
from botstudio.core.errors import ConfigurationError
from botstudio.core.logging import configure_logging
from botstudio.host.credentials import CredentialStore, resolve_token

logger = logging.getLogger(__name__)


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    token = resolve_token(CredentialStore(settings.credential_store_path), settings.telegram_bot_token)
    if not token:
        raise ConfigurationError('A cached token or TELEGRAM_BOT_TOKEN is required to run the bot')

    manager = BotManager(token, settings=settings)
    logger.info('Running Telegram bot headless; credential store at %s', settings.credential_store_path)
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda: asyncio.ensure_future(manager.stop()))

    await manager.start()
    try:
        await manager.join()
    finally:
        await manager.aclose()


if __name__ == '__main__':
    asyncio.run(run())
