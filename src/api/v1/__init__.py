"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.chats import router as chats_router
from api.v1.routes.queues import router as queues_router

router = APIRouter()
router.include_router(queues_router)
router.include_router(chats_router)
