"""Redis кэш статусов задач.

Redis Schema:
    {prefix}task:{task_id}  -> String (текущий статус)
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from task_lifecycle.core.config import RedisSettings
from task_lifecycle.core.constants import CACHE_KEY_TEMPLATE
from task_lifecycle.core.enums import TaskStatus
from task_lifecycle.shared.errors import StoreUnavailableError
from task_lifecycle.shared.logging import get_logger
from task_lifecycle.storage.base import FastStatusCache

logger = get_logger()

STORE_NAME = "cache"


class RedisStatusCache(FastStatusCache):
    """FastStatusCache поверх Redis.

    Attributes:
        redis: Async Redis client
        key_prefix: Префикс ключей
        ttl_seconds: TTL записи (0 - без истечения)

    """

    def __init__(self, redis_client: Redis, key_prefix: str = "", ttl_seconds: int = 0) -> None:
        """Инициализировать кэш.

        Args:
            redis_client: Async Redis client
            key_prefix: Префикс ключей
            ttl_seconds: TTL записи статуса

        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    def key(self, task_id: str) -> str:
        """Ключ Redis для задачи."""
        return CACHE_KEY_TEMPLATE.format(prefix=self.key_prefix, task_id=task_id)

    async def set(self, task_id: str, status: TaskStatus) -> None:
        """Перезаписать статус задачи.

        Args:
            task_id: ID задачи
            status: Статус

        Raises:
            StoreUnavailableError: Если Redis недоступен

        """
        value = TaskStatus(status).value
        try:
            if self.ttl_seconds:
                await self.redis.set(self.key(task_id), value, ex=self.ttl_seconds)
            else:
                await self.redis.set(self.key(task_id), value)
        except RedisError as e:
            raise StoreUnavailableError(STORE_NAME, "set", str(e)) from e

        logger.debug("Статус записан в кэш", task_id=task_id, status=value)

    async def get(self, task_id: str) -> TaskStatus | None:
        """Прочитать статус задачи.

        Args:
            task_id: ID задачи

        Returns:
            Статус или None если записи нет

        Raises:
            StoreUnavailableError: Если Redis недоступен или значение не является статусом

        """
        try:
            raw = await self.redis.get(self.key(task_id))
        except RedisError as e:
            raise StoreUnavailableError(STORE_NAME, "get", str(e)) from e

        if raw is None:
            return None

        value = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        try:
            return TaskStatus(value)
        except ValueError as e:
            raise StoreUnavailableError(STORE_NAME, "get", f"неизвестный статус '{value}'") from e

    async def health_check(self) -> bool:
        """Проверить доступность Redis.

        Returns:
            True если Redis доступен

        """
        try:
            await self.redis.ping()
            return True
        except RedisError as e:
            logger.error("Redis недоступен", error=str(e))
            return False

    async def close(self) -> None:
        """Закрыть соединение с Redis."""
        await self.redis.aclose()


def create_redis_status_cache(settings: RedisSettings) -> RedisStatusCache:
    """Создать RedisStatusCache по настройкам.

    Args:
        settings: Настройки Redis

    Returns:
        RedisStatusCache

    """
    redis_client = Redis.from_url(settings.url, decode_responses=True)
    logger.info("RedisStatusCache создан", key_prefix=settings.key_prefix, ttl=settings.status_ttl_seconds)
    return RedisStatusCache(
        redis_client,
        key_prefix=settings.key_prefix,
        ttl_seconds=settings.status_ttl_seconds,
    )
