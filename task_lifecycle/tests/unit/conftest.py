"""Pytest configuration для unit тестов."""

from collections.abc import AsyncIterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from task_lifecycle.app import create_app
from task_lifecycle.core.config import DatabaseSettings, InternalAuthSettings, Settings
from task_lifecycle.services.task import BackgroundTaskRunner, TaskLifecycleService
from task_lifecycle.storage import RedisStatusCache, SqlTaskStore, create_sql_task_store

INTERNAL_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Настройки с временной SQLite БД и известным секретом."""
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}"),
        internal=InternalAuthSettings(secret=INTERNAL_SECRET),
    )


@pytest.fixture
def redis_data() -> dict[str, str]:
    """Содержимое mock Redis."""
    return {}


@pytest.fixture
def mock_redis(redis_data: dict[str, str]) -> MagicMock:
    """Mock Redis client для тестирования (хранит значения в словаре)."""

    async def _set(key: str, value: str, ex: int | None = None) -> bool:
        redis_data[key] = value
        return True

    async def _get(key: str) -> str | None:
        return redis_data.get(key)

    redis = MagicMock()
    redis.set = AsyncMock(side_effect=_set)
    redis.get = AsyncMock(side_effect=_get)
    redis.ping = AsyncMock(return_value=True)
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def status_cache(mock_redis: MagicMock) -> RedisStatusCache:
    """RedisStatusCache поверх mock Redis."""
    return RedisStatusCache(mock_redis)


@pytest.fixture
async def durable_store(settings: Settings) -> AsyncIterator[SqlTaskStore]:
    """SqlTaskStore на временном файле SQLite."""
    store = create_sql_task_store(settings.database)
    await store.init_schema()
    yield store
    await store.close()


@pytest.fixture
def notifier() -> MagicMock:
    """DispatchNotifier, который только запоминает вызовы."""
    mock = MagicMock()
    mock.notify = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def runner() -> BackgroundTaskRunner:
    """Runner для фоновых dispatch."""
    return BackgroundTaskRunner()


@pytest.fixture
def service(
    durable_store: SqlTaskStore,
    status_cache: RedisStatusCache,
    notifier: MagicMock,
    runner: BackgroundTaskRunner,
) -> TaskLifecycleService:
    """TaskLifecycleService на тестовых хранилищах."""
    return TaskLifecycleService(durable_store, status_cache, notifier, runner)


@pytest.fixture
def app(settings: Settings, service: TaskLifecycleService) -> FastAPI:
    """Приложение с уже собранным сервисом (lifespan не запускается)."""
    application = create_app(settings)
    application.state.task_service = service
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Test client для FastAPI приложения."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def internal_headers() -> dict[str, str]:
    """Заголовки привилегированного вызова."""
    return {"x-internal-secret": INTERNAL_SECRET}
