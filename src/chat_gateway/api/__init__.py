"""
API router configuration.
"""
from fastapi import APIRouter
from .routes.chat import router as chat_router
from .routes.health import router as health_router
from .routes.admin import router as admin_router
from .routes.static import router as static_router

router = APIRouter()

router.include_router(chat_router)
router.include_router(health_router)
router.include_router(admin_router, prefix="/admin")
router.include_router(static_router)
