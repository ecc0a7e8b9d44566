"""Response Schemas для Task Lifecycle Service API."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from task_lifecycle.core.enums import HealthStatus, TaskStatus, TransitionOutcome
from task_lifecycle.domain.models import Task


class CreateTaskResponse(BaseModel):
    """Ответ на создание задачи.

    POST /task -> 202
    """

    model_config = ConfigDict(populate_by_name=True)

    task_id: str = Field(alias="taskId", description="ID созданной задачи")


class TaskResponse(BaseModel):
    """Полная запись задачи.

    GET /task/{task_id}
    """

    id: str = Field(description="ID задачи")
    status: TaskStatus = Field(description="Статус задачи")
    created_at: datetime = Field(description="Время создания (UTC)")
    updated_at: datetime = Field(description="Время последнего перехода (UTC)")
    result: Any | None = Field(default=None, description="Результат (только для completed)")
    error: Any | None = Field(default=None, description="Ошибка (только для failed)")

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        """Построить ответ из доменной модели."""
        return cls(
            id=task.id,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
            result=task.result,
            error=task.error,
        )


class TransitionResponse(BaseModel):
    """Ответ на callback worker'а (включая идемпотентный повтор)."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok"] = "ok"
    task_id: str = Field(alias="taskId", description="ID задачи")
    outcome: TransitionOutcome = Field(description="applied или noop")


class HealthResponse(BaseModel):
    """Состояние хранилищ."""

    status: HealthStatus
    durable_store: bool
    status_cache: bool
