"""Transition Coordinator - единая точка изменения статуса задачи.

Алгоритм apply(task_id, target):
    0. Проверить, что result/error сериализуются в JSON (иначе 400, ничего не пишется)
    1. Прочитать текущий статус из durable store (TaskNotFoundError -> 404)
    2. current == target -> NOOP, ничего не пишется
    3. Переход недопустим -> InvalidTransitionError, ничего не пишется
    4. Записать кэш, затем durable store (compare-and-swap по current)
    5. CAS проиграл -> перечитать авторитетную строку, починить кэш, повторить с шага 2

Если durable store не умеет условную запись, вся последовательность
выполняется под эксклюзивной блокировкой по task_id.

Example:
    >>> coordinator = TransitionCoordinator(durable_store, status_cache)
    >>> outcome = await coordinator.apply(task_id, TaskStatus.RUNNING)

"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import orjson

from task_lifecycle.core.enums import TaskStatus, TransitionOutcome
from task_lifecycle.domain.models import Task, utcnow
from task_lifecycle.domain.state_machine import can_transition
from task_lifecycle.shared.errors import InvalidTransitionError, MalformedRequestError
from task_lifecycle.shared.logging import get_logger
from task_lifecycle.storage.base import DurableTaskStore, FastStatusCache

logger = get_logger()


class KeyedLock:
    """Набор asyncio.Lock по ключу.

    Блокировка создаётся при первом захвате и удаляется, когда её
    отпускает последний ожидающий.
    """

    def __init__(self) -> None:
        """Инициализировать пустой реестр блокировок."""
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Захватить блокировку для key на время контекста.

        Args:
            key: Ключ (task_id)

        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class TransitionCoordinator:
    """Координатор переходов статуса.

    Не хранит состояние задач: всё лежит в двух хранилищах по task_id.

    Attributes:
        durable_store: Авторитетное хранилище
        status_cache: Кэш статусов

    """

    def __init__(self, durable_store: DurableTaskStore, status_cache: FastStatusCache) -> None:
        """Инициализировать TransitionCoordinator.

        Args:
            durable_store: Авторитетное хранилище задач
            status_cache: Кэш статусов для polling

        """
        self.durable_store = durable_store
        self.status_cache = status_cache
        self._locks = KeyedLock()

    async def apply(
        self,
        task_id: str,
        target: TaskStatus,
        result: Any | None = None,
        error: Any | None = None,
    ) -> TransitionOutcome:
        """Применить переход к целевому статусу.

        Args:
            task_id: ID задачи
            target: Целевой статус
            result: Результат (записывается только для completed)
            error: Ошибка (записывается только для failed)

        Returns:
            APPLIED если статус изменён, NOOP если задача уже в target

        Raises:
            TaskNotFoundError: Если задачи нет
            MalformedRequestError: Если result/error не сериализуется в JSON
            InvalidTransitionError: Если переход недопустим
            StoreUnavailableError: Если хранилище недоступно

        """
        target = TaskStatus(target)
        result = result if target is TaskStatus.COMPLETED else None
        error = error if target is TaskStatus.FAILED else None
        self._check_payload(task_id, result if target is TaskStatus.COMPLETED else error)

        if self.durable_store.supports_conditional_update:
            return await self._apply_conditional(task_id, target, result, error)

        async with self._locks.hold(task_id):
            return await self._apply_locked(task_id, target, result, error)

    async def _apply_conditional(
        self,
        task_id: str,
        target: TaskStatus,
        result: Any | None,
        error: Any | None,
    ) -> TransitionOutcome:
        lost_race = False
        # Каждый проигранный CAS означает, что статус продвинулся вперёд
        # по конечному графу, поэтому цикл конечен.
        while True:
            task = await self.durable_store.get_by_id(task_id)

            if lost_race:
                # Кэш мог получить наш статус до проигранного CAS
                await self.status_cache.set(task_id, task.status)

            if self._check(task, target):
                return TransitionOutcome.NOOP

            await self.status_cache.set(task_id, target)
            committed = await self.durable_store.update_status(
                task_id,
                target,
                result,
                error,
                utcnow(),
                expected_status=task.status,
            )
            if committed:
                self._log_applied(task, target)
                return TransitionOutcome.APPLIED

            logger.info(
                "Конкурентный переход, перечитываем задачу",
                task_id=task_id,
                expected=task.status.value,
                target=target.value,
            )
            lost_race = True

    async def _apply_locked(
        self,
        task_id: str,
        target: TaskStatus,
        result: Any | None,
        error: Any | None,
    ) -> TransitionOutcome:
        task = await self.durable_store.get_by_id(task_id)

        if self._check(task, target):
            return TransitionOutcome.NOOP

        await self.status_cache.set(task_id, target)
        await self.durable_store.update_status(task_id, target, result, error, utcnow())
        self._log_applied(task, target)
        return TransitionOutcome.APPLIED

    @staticmethod
    def _check_payload(task_id: str, payload: Any | None) -> None:
        """Шаг 0: payload должен кодироваться до любой записи в хранилища."""
        try:
            orjson.dumps(payload)
        except orjson.JSONEncodeError as e:
            logger.warning("Payload не сериализуется в JSON", task_id=task_id, error=str(e))
            raise MalformedRequestError(
                message="result/error не сериализуется в JSON",
                details={"task_id": task_id, "reason": str(e)},
            ) from e

    @staticmethod
    def _check(task: Task, target: TaskStatus) -> bool:
        """Шаги 2-3: True для идемпотентного повтора, исключение для недопустимого перехода."""
        if task.status is target:
            logger.debug("Идемпотентный повтор перехода", task_id=task.id, status=target.value)
            return True

        if not can_transition(task.status, target):
            raise InvalidTransitionError(task.id, task.status.value, target.value)

        return False

    @staticmethod
    def _log_applied(task: Task, target: TaskStatus) -> None:
        logger.info(
            "Переход применён",
            task_id=task.id,
            previous=task.status.value,
            status=target.value,
        )
