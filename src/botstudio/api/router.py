from fastapi import APIRouter

from botstudio.api.routes.bot import router as bot_router
from botstudio.api.routes.edits import router as edits_router
from botstudio.api.routes.system import router as system_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(edits_router)
api_router.include_router(bot_router)
