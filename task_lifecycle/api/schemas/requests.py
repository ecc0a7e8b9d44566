"""Request Schemas для Task Lifecycle Service API.

Pydantic models для тел привилегированных callbacks.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from task_lifecycle.core.constants import DEFAULT_FAILURE_ERROR


class InternalTaskRequest(BaseModel):
    """Базовое тело callback'а worker'а.

    POST /internal/task/start
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"taskId": "3f0c7a52-6d8e-4d8b-9a57-0f0b8b0f6d11"}]},
    )

    task_id: str = Field(alias="taskId", min_length=1, description="ID задачи")


class CompleteTaskRequest(InternalTaskRequest):
    """Тело callback'а об успешном завершении.

    POST /internal/task/complete
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"taskId": "3f0c7a52-6d8e-4d8b-9a57-0f0b8b0f6d11", "result": {"flights": 3}}]
        },
    )

    result: Any | None = Field(default=None, description="Результат (произвольный JSON)")


class FailTaskRequest(InternalTaskRequest):
    """Тело callback'а о провале.

    POST /internal/task/fail
    """

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"taskId": "3f0c7a52-6d8e-4d8b-9a57-0f0b8b0f6d11", "error": "timeout"}]},
    )

    error: Any = Field(default=DEFAULT_FAILURE_ERROR, description="Диагностика ошибки")

    @field_validator("error")
    @classmethod
    def default_error(cls, value: Any) -> Any:
        """Явный null заменяется на сообщение по умолчанию.

        Args:
            value: Переданная ошибка.

        Returns:
            Ошибка или DEFAULT_FAILURE_ERROR.

        """
        return DEFAULT_FAILURE_ERROR if value is None else value
