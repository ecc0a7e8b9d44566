"""API schemas."""

from task_lifecycle.api.schemas.requests import CompleteTaskRequest, FailTaskRequest, InternalTaskRequest
from task_lifecycle.api.schemas.responses import (
    CreateTaskResponse,
    HealthResponse,
    TaskResponse,
    TransitionResponse,
)

__all__ = [
    "CompleteTaskRequest",
    "CreateTaskResponse",
    "FailTaskRequest",
    "HealthResponse",
    "InternalTaskRequest",
    "TaskResponse",
    "TransitionResponse",
]
