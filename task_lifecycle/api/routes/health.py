"""Health Check Endpoint.

Проверка доступности обоих хранилищ.
"""

from fastapi import APIRouter, Response, status

from task_lifecycle.api.schemas import HealthResponse
from task_lifecycle.core.dependencies import TaskServiceDep
from task_lifecycle.core.enums import HealthStatus
from task_lifecycle.shared.logging import get_logger

logger = get_logger()

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Проверяет durable store и кэш статусов",
)
async def health_check(service: TaskServiceDep, response: Response) -> HealthResponse:
    """Проверить здоровье хранилищ.

    Args:
        service: TaskLifecycleService
        response: Ответ (для выставления 503)

    Returns:
        HealthResponse

    """
    durable_ok = await service.durable_store.health_check()
    cache_ok = await service.status_cache.health_check()

    health_status = HealthStatus.HEALTHY if durable_ok and cache_ok else HealthStatus.DEGRADED
    if health_status is HealthStatus.DEGRADED:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: degraded", durable_store=durable_ok, status_cache=cache_ok)

    return HealthResponse(status=health_status, durable_store=durable_ok, status_cache=cache_ok)
