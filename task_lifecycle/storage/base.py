"""Storage ports.

Два взаимозаменяемых хранилища за узкими интерфейсами:

- DurableTaskStore: авторитетная запись задачи (system of record)
- FastStatusCache: денормализованный текущий статус для частого polling

Координатор переходов работает только с этими интерфейсами, поэтому
backend любого из хранилищ можно заменить, не трогая координатор.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from task_lifecycle.core.enums import TaskStatus
from task_lifecycle.domain.models import Task


class DurableTaskStore(ABC):
    """Авторитетное хранилище задач.

    Attributes:
        supports_conditional_update: Хранилище умеет атомарный
            compare-and-swap по текущему статусу (update_status с
            expected_status). Если False, координатор сериализует
            переходы по task_id сам.

    """

    supports_conditional_update: bool = True

    @abstractmethod
    async def insert(self, task: Task) -> None:
        """Вставить новую задачу.

        Raises:
            TaskAlreadyExistsError: Если ID уже занят
            StoreUnavailableError: Если хранилище недоступно

        """

    @abstractmethod
    async def get_by_id(self, task_id: str) -> Task:
        """Прочитать задачу.

        Raises:
            TaskNotFoundError: Если задачи нет
            StoreUnavailableError: Если хранилище недоступно

        """

    @abstractmethod
    async def update_status(
        self,
        task_id: str,
        status: TaskStatus,
        result: Any | None,
        error: Any | None,
        updated_at: datetime,
        expected_status: TaskStatus | None = None,
    ) -> bool:
        """Записать новый статус.

        Без expected_status запись безусловная. С expected_status строка
        обновляется только если её текущий статус равен expected_status.

        Returns:
            True если строка была изменена

        Raises:
            StoreUnavailableError: Если хранилище недоступно

        """

    async def init_schema(self) -> None:  # noqa: B027
        """Подготовить схему хранилища (по умолчанию ничего)."""

    async def health_check(self) -> bool:
        """Проверить доступность хранилища."""
        return True

    async def close(self) -> None:  # noqa: B027
        """Освободить ресурсы."""


class FastStatusCache(ABC):
    """Кэш текущего статуса задач.

    Только быстрый read path. Никогда не решает вопрос допустимости
    перехода: при расхождении прав durable store.
    """

    @abstractmethod
    async def set(self, task_id: str, status: TaskStatus) -> None:
        """Перезаписать статус (без истории).

        Raises:
            StoreUnavailableError: Если кэш недоступен

        """

    @abstractmethod
    async def get(self, task_id: str) -> TaskStatus | None:
        """Прочитать статус.

        Returns:
            Статус или None если записи нет

        Raises:
            StoreUnavailableError: Если кэш недоступен

        """

    async def health_check(self) -> bool:
        """Проверить доступность кэша."""
        return True

    async def close(self) -> None:  # noqa: B027
        """Освободить ресурсы."""
