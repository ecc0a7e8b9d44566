"""Task Lifecycle Service - публичные операции над задачами.

Единственный компонент, который знает об обоих хранилищах,
state machine (через TransitionCoordinator) и dispatch.

Example:
    >>> service = TaskLifecycleService(durable_store, status_cache, notifier, runner)
    >>> task_id = await service.create()
    >>> task = await service.get(task_id)
    >>> await service.transition(task_id, TaskStatus.RUNNING)

"""

import uuid
from typing import Any

from task_lifecycle.core.enums import TaskStatus, TransitionOutcome
from task_lifecycle.domain.models import Task
from task_lifecycle.services.task.background import BackgroundTaskRunner
from task_lifecycle.services.task.dispatch_notifier import DispatchNotifier
from task_lifecycle.services.task.transition_coordinator import TransitionCoordinator
from task_lifecycle.shared.errors import StoreUnavailableError, TaskNotFoundError
from task_lifecycle.shared.logging import get_logger
from task_lifecycle.storage.base import DurableTaskStore, FastStatusCache

logger = get_logger()


class TaskLifecycleService:
    """Сервис жизненного цикла задач.

    Attributes:
        durable_store: Авторитетное хранилище
        status_cache: Кэш статусов (gate существования на чтении)
        notifier: Dispatch во внешний backend
        runner: Runner для fire-and-forget dispatch
        coordinator: Координатор переходов
        read_through: При промахе кэша читать durable store и чинить кэш

    """

    def __init__(
        self,
        durable_store: DurableTaskStore,
        status_cache: FastStatusCache,
        notifier: DispatchNotifier,
        runner: BackgroundTaskRunner,
        coordinator: TransitionCoordinator | None = None,
        read_through: bool = False,
    ) -> None:
        """Инициализировать TaskLifecycleService.

        Args:
            durable_store: Авторитетное хранилище задач
            status_cache: Кэш статусов
            notifier: DispatchNotifier
            runner: BackgroundTaskRunner для dispatch
            coordinator: Координатор (по умолчанию строится по хранилищам)
            read_through: Включить read-through при промахе кэша

        """
        self.durable_store = durable_store
        self.status_cache = status_cache
        self.notifier = notifier
        self.runner = runner
        self.coordinator = coordinator or TransitionCoordinator(durable_store, status_cache)
        self.read_through = read_through

        logger.info("TaskLifecycleService инициализирован", read_through=read_through)

    async def create(self) -> str:
        """Создать задачу и запустить dispatch без ожидания.

        Durable store пишется первым: строка без записи в кэше невидима
        для get, поэтому провал записи в кэш не оставляет видимой
        полусозданной задачи.

        Returns:
            task_id новой задачи

        Raises:
            TaskAlreadyExistsError: При коллизии ID
            StoreUnavailableError: Если одно из хранилищ недоступно

        """
        task = Task.new(str(uuid.uuid4()))

        await self.durable_store.insert(task)

        try:
            await self.status_cache.set(task.id, TaskStatus.PENDING)
        except StoreUnavailableError:
            logger.error("Задача записана в durable store, но не в кэш", task_id=task.id)
            raise

        self.runner.submit(self.notifier.notify(task.id), name=f"dispatch:{task.id}")

        logger.info("Задача создана", task_id=task.id)
        return task.id

    async def get(self, task_id: str) -> Task:
        """Получить задачу.

        Кэш - gate существования: промах кэша означает "не найдено",
        даже если строка в durable store есть (кроме режима read_through).

        Args:
            task_id: ID задачи

        Returns:
            Полная запись из durable store

        Raises:
            TaskNotFoundError: Если задачи нет в кэше или в durable store
            StoreUnavailableError: Если хранилище недоступно

        """
        cached_status = await self.status_cache.get(task_id)

        if cached_status is None:
            if not self.read_through:
                raise TaskNotFoundError(task_id)

            task = await self.durable_store.get_by_id(task_id)
            await self.status_cache.set(task_id, task.status)
            logger.info("Кэш восстановлен из durable store", task_id=task_id, status=task.status.value)
            return task

        return await self.durable_store.get_by_id(task_id)

    async def transition(
        self,
        task_id: str,
        target: TaskStatus,
        payload: Any | None = None,
    ) -> TransitionOutcome:
        """Применить переход статуса.

        Args:
            task_id: ID задачи
            target: Целевой статус
            payload: result для completed, error для failed, игнорируется для running

        Returns:
            APPLIED или NOOP (идемпотентный повтор)

        Raises:
            TaskNotFoundError: Если задачи нет
            InvalidTransitionError: Если переход недопустим
            StoreUnavailableError: Если хранилище недоступно

        """
        target = TaskStatus(target)
        return await self.coordinator.apply(
            task_id,
            target,
            result=payload if target is TaskStatus.COMPLETED else None,
            error=payload if target is TaskStatus.FAILED else None,
        )

    async def start(self, task_id: str) -> TransitionOutcome:
        """pending -> running."""
        return await self.transition(task_id, TaskStatus.RUNNING)

    async def complete(self, task_id: str, result: Any | None = None) -> TransitionOutcome:
        """running -> completed с результатом."""
        return await self.transition(task_id, TaskStatus.COMPLETED, result)

    async def fail(self, task_id: str, error: Any | None = None) -> TransitionOutcome:
        """running -> failed с диагностикой."""
        return await self.transition(task_id, TaskStatus.FAILED, error)
