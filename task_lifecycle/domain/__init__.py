"""Domain - модель задачи и state machine."""

from task_lifecycle.domain.models import Task, utcnow
from task_lifecycle.domain.state_machine import (
    ALLOWED_TRANSITIONS,
    allowed_targets,
    can_transition,
    is_terminal,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Task",
    "allowed_targets",
    "can_transition",
    "is_terminal",
    "utcnow",
]
