"""Task Management Module.

- TransitionCoordinator: единственная точка изменения статуса
- TaskLifecycleService: create / get / transition
- DispatchNotifier: триггер внешнего backend
- BackgroundTaskRunner: fire-and-forget выполнение dispatch

Архитектура:
    ┌──────────────────────┐
    │ TaskLifecycleService │
    └──────────┬───────────┘
               │
       ┌───────┼──────────────┬──────────────┐
       ▼       ▼              ▼              ▼
  Coordinator  DurableStore  StatusCache   Runner -> Notifier
"""

from task_lifecycle.services.task.background import BackgroundTaskRunner
from task_lifecycle.services.task.dispatch_notifier import (
    DispatchNotifier,
    GitHubDispatchNotifier,
    NullDispatchNotifier,
)
from task_lifecycle.services.task.lifecycle_service import TaskLifecycleService
from task_lifecycle.services.task.transition_coordinator import KeyedLock, TransitionCoordinator

__all__ = [
    "BackgroundTaskRunner",
    "DispatchNotifier",
    "GitHubDispatchNotifier",
    "KeyedLock",
    "NullDispatchNotifier",
    "TaskLifecycleService",
    "TransitionCoordinator",
]
