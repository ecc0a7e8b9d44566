"""Dispatch Notifier - триггер внешнего execution backend.

Отвечает ТОЛЬКО за отправку сигнала "задача готова к выполнению".
НЕ меняет состояние задачи: статус меняют только callbacks worker'а.

Формат запроса (GitHub repository_dispatch):
    POST {url}
    Authorization: token {token}
    {"event_type": "process-task", "client_payload": {"taskId": "..."}}

Example:
    >>> notifier = GitHubDispatchNotifier(http_client, settings.dispatch)
    >>> await notifier.notify(task_id)

"""

from typing import Protocol

import httpx
from prometheus_client import Counter

from task_lifecycle.core.config import DispatchSettings
from task_lifecycle.core.constants import DISPATCH_ACCEPTED_STATUS
from task_lifecycle.core.enums import DispatchOutcome
from task_lifecycle.shared.logging import get_logger

logger = get_logger()

DISPATCH_TOTAL = Counter(
    "task_dispatch_total",
    "Dispatch уведомления во внешний backend по результату",
    ["outcome"],
)


class DispatchNotifier(Protocol):
    """Интерфейс уведомления внешнего backend."""

    async def notify(self, task_id: str) -> None:
        """Отправить сигнал о новой задаче. Не бросает исключений."""
        ...


class GitHubDispatchNotifier:
    """Notifier через HTTP триггер (GitHub repository_dispatch).

    Без retry: неудачный dispatch оставляет задачу в pending.

    Attributes:
        client: Общий httpx.AsyncClient
        settings: Настройки dispatch

    """

    def __init__(self, client: httpx.AsyncClient, settings: DispatchSettings) -> None:
        """Инициализировать notifier.

        Args:
            client: httpx.AsyncClient (жизненным циклом управляет приложение)
            settings: Настройки dispatch

        """
        self.client = client
        self.settings = settings

        logger.info(
            "GitHubDispatchNotifier инициализирован",
            url=settings.url,
            event_type=settings.event_type,
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        if self.settings.token:
            headers["Authorization"] = f"token {self.settings.token}"
        return headers

    async def notify(self, task_id: str) -> None:
        """Отправить dispatch для задачи.

        Args:
            task_id: ID задачи (correlation token для worker'а)

        Note:
            НЕ бросает исключения - результат виден только в логах и метриках.

        """
        payload = {
            "event_type": self.settings.event_type,
            "client_payload": {"taskId": task_id},
        }

        logger.info("Dispatch задачи во внешний backend", task_id=task_id)

        try:
            response = await self.client.post(
                self.settings.url,  # type: ignore[arg-type]
                json=payload,
                headers=self._headers(),
                timeout=self.settings.timeout_seconds,
            )
        except httpx.HTTPError as e:
            DISPATCH_TOTAL.labels(outcome=DispatchOutcome.ERROR.value).inc()
            logger.error("Dispatch не отправлен", task_id=task_id, error=str(e))
            return

        logger.info("Dispatch статус", task_id=task_id, status_code=response.status_code)

        if response.status_code != DISPATCH_ACCEPTED_STATUS:
            DISPATCH_TOTAL.labels(outcome=DispatchOutcome.REJECTED.value).inc()
            logger.error(
                "Dispatch отклонён",
                task_id=task_id,
                status_code=response.status_code,
                body=response.text,
            )
            return

        DISPATCH_TOTAL.labels(outcome=DispatchOutcome.ACCEPTED.value).inc()


class NullDispatchNotifier:
    """Notifier для окружений без внешнего backend."""

    async def notify(self, task_id: str) -> None:
        """Только залогировать пропуск dispatch."""
        logger.warning("Dispatch отключён (не задан dispatch.url)", task_id=task_id)
