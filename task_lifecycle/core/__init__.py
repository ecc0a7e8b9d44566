"""Task Lifecycle Service - Core module.

Ядро приложения: конфигурация, константы, enum'ы.
"""

from task_lifecycle.core.config import Settings, get_settings
from task_lifecycle.core.enums import TaskStatus, TransitionOutcome

__all__ = [
    "Settings",
    "TaskStatus",
    "TransitionOutcome",
    "get_settings",
]
