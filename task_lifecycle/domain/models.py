"""Доменная модель задачи."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from task_lifecycle.core.enums import TaskStatus


def utcnow() -> datetime:
    """Текущее время в UTC."""
    return datetime.now(timezone.utc)


class Task(BaseModel):
    """Задача, выполняемая во внешнем backend.

    Авторитетная копия хранится в durable хранилище, денормализованный
    статус - в кэше статусов.

    Attributes:
        id: Уникальный ID (join key между хранилищами)
        status: Текущий статус
        result: Результат (только для completed)
        error: Диагностика ошибки (только для failed)
        created_at: Время создания (UTC)
        updated_at: Время последнего принятого перехода (UTC)

    """

    model_config = ConfigDict(frozen=True)

    id: str
    status: TaskStatus = TaskStatus.PENDING
    result: Any | None = None
    error: Any | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def new(cls, task_id: str) -> "Task":
        """Создать новую задачу в статусе pending.

        Args:
            task_id: Сгенерированный ID

        Returns:
            Task с совпадающими created_at и updated_at

        """
        now = utcnow()
        return cls(id=task_id, status=TaskStatus.PENDING, created_at=now, updated_at=now)
