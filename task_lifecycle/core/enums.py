"""Enums для Task Lifecycle Service.

Централизованное хранилище всех enum'ов проекта.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Статус задачи."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class TransitionOutcome(str, Enum):
    """Результат применения перехода."""

    APPLIED = "applied"  # Статус изменён, оба хранилища записаны
    NOOP = "noop"  # Задача уже в целевом статусе, ничего не записано


class DispatchOutcome(str, Enum):
    """Результат отправки dispatch уведомления."""

    ACCEPTED = "accepted"  # Backend ответил 204
    REJECTED = "rejected"  # Любой другой HTTP статус
    ERROR = "error"  # Ошибка транспорта


class HealthStatus(str, Enum):
    """Статус здоровья сервиса."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"

