from fastapi import APIRouter, Request

router = APIRouter(tags=["system"])


@router.get("/healthz")
def healthz() -> dict[str, str]:
    """Liveness probe used by orchestrators."""
    return {"status": "ok"}


@router.get("/readyz")
def readyz(request: Request) -> dict[str, object]:
    """Report whether host state is initialized and the bot is polling."""
    bot_host = getattr(request.app.state, "bot_host", None)
    return {
        "status": "ready" if bot_host is not None else "not_ready",
        "bot_running": bool(getattr(bot_host, "is_running", False)),
    }
