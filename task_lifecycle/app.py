"""Task Lifecycle Service - FastAPI Application.

Главное приложение с инициализацией всех компонентов.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from prometheus_fastapi_instrumentator import Instrumentator

from task_lifecycle import __version__
from task_lifecycle.api import router as api_router
from task_lifecycle.core.config import Settings, get_settings
from task_lifecycle.core.constants import TRACE_ID_HEADER
from task_lifecycle.services.task import (
    BackgroundTaskRunner,
    DispatchNotifier,
    GitHubDispatchNotifier,
    NullDispatchNotifier,
    TaskLifecycleService,
)
from task_lifecycle.shared.errors import StoreUnavailableError, set_trace_id, setup_exception_handlers
from task_lifecycle.shared.logging import get_logger, setup_logging
from task_lifecycle.storage import create_redis_status_cache, create_sql_task_store

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager для startup/shutdown.

    Args:
        app: FastAPI application

    Yields:
        None

    """
    settings: Settings = app.state.settings

    # =================================================================
    # Startup
    # =================================================================
    logger.info("Task Lifecycle Service запускается", env=settings.environment, debug=settings.debug)

    durable_store = create_sql_task_store(settings.database)
    await durable_store.init_schema()

    status_cache = create_redis_status_cache(settings.redis)
    if not await status_cache.health_check():
        await durable_store.close()
        raise StoreUnavailableError("cache", "connect", settings.redis.url)

    http_client = httpx.AsyncClient()
    notifier: DispatchNotifier
    if settings.dispatch.enabled:
        notifier = GitHubDispatchNotifier(http_client, settings.dispatch)
    else:
        notifier = NullDispatchNotifier()
        logger.warning("dispatch.url не задан, задачи не будут отправляться во внешний backend")

    if settings.internal.secret is None:
        logger.warning("internal.secret не задан, привилегированные endpoints отклоняют все вызовы")

    runner = BackgroundTaskRunner()
    app.state.task_service = TaskLifecycleService(
        durable_store,
        status_cache,
        notifier,
        runner,
        read_through=settings.cache.read_through,
    )

    logger.info("Task Lifecycle Service готов", host=settings.server.host, port=settings.server.port)

    yield

    # =================================================================
    # Shutdown
    # =================================================================
    logger.info("Task Lifecycle Service останавливается")

    await runner.drain(settings.dispatch.drain_timeout_seconds)
    await http_client.aclose()
    await status_cache.close()
    await durable_store.close()

    logger.info("Task Lifecycle Service остановлен")


async def trace_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Выставить trace_id на время запроса и вернуть его в заголовке."""
    trace_id = set_trace_id(request.headers.get(TRACE_ID_HEADER))
    response = await call_next(request)
    response.headers[TRACE_ID_HEADER] = trace_id
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Создать FastAPI приложение.

    Args:
        settings: Настройки (по умолчанию из окружения)

    Returns:
        FastAPI application

    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Жизненный цикл задач, выполняемых во внешнем backend",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    app.middleware("http")(trace_id_middleware)
    setup_exception_handlers(app)

    if settings.environment != "development":
        Instrumentator().instrument(app).expose(app)
        logger.info("Prometheus metrics enabled на /metrics")

    app.include_router(api_router)

    @app.get("/", tags=["root"])
    async def root() -> dict[str, str]:
        """Информация о сервисе."""
        return {
            "service": settings.app_name,
            "version": __version__,
            "status": "running",
        }

    return app
