"""Background Task Runner - detached работа без ожидания вызывающим.

Вызывающий получает ответ сразу, результат фоновой работы виден только
в логах. Runner держит сильные ссылки на asyncio.Task до завершения
и умеет дождаться незавершённых задач при остановке.

Example:
    >>> runner = BackgroundTaskRunner()
    >>> runner.submit(notifier.notify(task_id), name=f"dispatch:{task_id}")
    >>> await runner.drain(timeout=5.0)

"""

import asyncio
from collections.abc import Coroutine
from typing import Any

from task_lifecycle.shared.logging import get_logger

logger = get_logger()


class BackgroundTaskRunner:
    """Runner для fire-and-forget корутин."""

    def __init__(self) -> None:
        """Инициализировать пустой runner."""
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Количество незавершённых задач."""
        return len(self._tasks)

    def submit(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
        """Запустить корутину в фоне.

        Args:
            coro: Корутина
            name: Имя задачи для логов

        Returns:
            Созданная asyncio.Task (ждать её вызывающему не нужно)

        """
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            logger.warning("Фоновая задача отменена", name=task.get_name())
            return

        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(
                "Фоновая задача завершилась с ошибкой",
                name=task.get_name(),
                error=str(exc),
            )

    async def drain(self, timeout: float) -> None:
        """Дождаться незавершённых задач, остальные отменить.

        Args:
            timeout: Максимальное время ожидания в секундах

        """
        if not self._tasks:
            return

        tasks = list(self._tasks)
        logger.info("Ожидание фоновых задач", count=len(tasks), timeout=timeout)

        _, still_pending = await asyncio.wait(tasks, timeout=timeout)
        for task in still_pending:
            task.cancel()

        if still_pending:
            await asyncio.gather(*still_pending, return_exceptions=True)
            logger.warning("Фоновые задачи отменены по таймауту", count=len(still_pending))
