"""Storage - durable store и кэш статусов."""

from task_lifecycle.storage.base import DurableTaskStore, FastStatusCache
from task_lifecycle.storage.redis_status_cache import RedisStatusCache, create_redis_status_cache
from task_lifecycle.storage.sql_store import SqlTaskStore, create_sql_task_store

__all__ = [
    "DurableTaskStore",
    "FastStatusCache",
    "RedisStatusCache",
    "SqlTaskStore",
    "create_redis_status_cache",
    "create_sql_task_store",
]
