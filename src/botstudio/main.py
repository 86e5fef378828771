import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from botstudio import __version__
from botstudio.api.router import api_router
from botstudio.bot.manager import ImageEditor
from botstudio.core.config import LOCAL_ENVIRONMENTS, get_settings
from botstudio.core.logging import configure_logging
from botstudio.host.bot_host import BotHost, ManagerFactory
from botstudio.host.buffers import BotLogBuffer, HistoryStore
from botstudio.host.credentials import CredentialStore
from botstudio.imaging.edit_client import ImageEditClient

logger = logging.getLogger(__name__)


def create_app(
    *,
    edit_client: ImageEditor | None = None,
    manager_factory: ManagerFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)
    is_local_environment = settings.environment.strip().lower() in LOCAL_ENVIRONMENTS

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and clean up application resources."""
        app.state.settings = settings
        app.state.history = HistoryStore(settings.history_limit)
        app.state.bot_logs = BotLogBuffer(settings.bot_log_limit)
        app.state.edit_client = edit_client or ImageEditClient(settings)
        app.state.bot_host = BotHost(
            credentials=CredentialStore(settings.credential_store_path),
            logs=app.state.bot_logs,
            settings=settings,
            editor=app.state.edit_client,
            manager_factory=manager_factory,
        )
        yield
        host = app.state.bot_host
        if host is not None:
            try:
                await host.aclose()
            except Exception:
                logger.exception("Failed to shut down the Telegram bot")
        app.state.bot_host = None

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if is_local_environment else None,
        redoc_url="/redoc" if is_local_environment else None,
        openapi_url="/openapi.json" if is_local_environment else None,
    )
    app.include_router(api_router)

    @app.get("/", tags=["meta"])
    def root() -> dict[str, str]:
        """Return basic service metadata."""
        payload = {
            "name": settings.app_name,
            "status": "ok",
        }
        if is_local_environment:
            payload["environment"] = settings.environment
        return payload

    return app


app = create_app()
