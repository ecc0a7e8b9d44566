"""Task Lifecycle Service - API Module.

Главный роутер: публичные, привилегированные и служебные endpoints.
"""

from fastapi import APIRouter

from task_lifecycle.api.routes import health, internal, tasks

router = APIRouter()

router.include_router(tasks.router)
router.include_router(internal.router)
router.include_router(health.router)
router.include_router(internal.fallback_router)

__all__ = ["router"]
