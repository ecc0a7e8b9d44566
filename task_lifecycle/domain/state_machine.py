"""State machine переходов статуса задачи.

Единственный источник истины о допустимых переходах. Чистые функции,
без I/O и состояния.

    pending   -> running
    running   -> completed | failed
    completed -> (нет)
    failed    -> (нет)
"""

from types import MappingProxyType

from task_lifecycle.core.enums import TaskStatus

ALLOWED_TRANSITIONS: MappingProxyType[TaskStatus, frozenset[TaskStatus]] = MappingProxyType(
    {
        TaskStatus.PENDING: frozenset({TaskStatus.RUNNING}),
        TaskStatus.RUNNING: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
        TaskStatus.COMPLETED: frozenset(),
        TaskStatus.FAILED: frozenset(),
    }
)


def allowed_targets(status: TaskStatus) -> frozenset[TaskStatus]:
    """Множество статусов, достижимых из status за один переход."""
    return ALLOWED_TRANSITIONS[TaskStatus(status)]


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Проверить, допустим ли переход current -> target.

    Args:
        current: Текущий статус
        target: Запрошенный статус

    Returns:
        True если ребро current -> target есть в графе

    """
    return TaskStatus(target) in allowed_targets(current)


def is_terminal(status: TaskStatus) -> bool:
    """Статус терминальный (нет исходящих переходов)."""
    return not allowed_targets(status)
