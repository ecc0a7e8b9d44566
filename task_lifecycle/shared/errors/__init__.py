"""Shared errors module.

Система обработки ошибок приложения.
"""

from task_lifecycle.shared.errors.base import AppException
from task_lifecycle.shared.errors.context import get_trace_id, set_trace_id, trace_id_var
from task_lifecycle.shared.errors.domain_errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    MalformedRequestError,
    NotFoundError,
    ServiceUnavailableError,
    StoreUnavailableError,
    TaskAlreadyExistsError,
    TaskNotFoundError,
    UnauthorizedError,
)
from task_lifecycle.shared.errors.handlers import setup_exception_handlers
from task_lifecycle.shared.errors.schemas import ErrorResponse

__all__ = [
    # Base
    "AppException",
    # Context
    "trace_id_var",
    "get_trace_id",
    "set_trace_id",
    # Domain errors
    "BadRequestError",
    "ConflictError",
    "ForbiddenError",
    "InvalidTransitionError",
    "MalformedRequestError",
    "NotFoundError",
    "ServiceUnavailableError",
    "StoreUnavailableError",
    "TaskAlreadyExistsError",
    "TaskNotFoundError",
    "UnauthorizedError",
    # Handlers
    "setup_exception_handlers",
    # Schemas
    "ErrorResponse",
]
