"""Task Lifecycle Service - Dependencies.

Dependency Injection для FastAPI.
"""

import hmac
from typing import Annotated

from fastapi import Depends, Request

from task_lifecycle.core.config import Settings
from task_lifecycle.services.task.lifecycle_service import TaskLifecycleService
from task_lifecycle.shared.errors import ServiceUnavailableError, UnauthorizedError
from task_lifecycle.shared.logging import get_logger

logger = get_logger()


def get_settings(request: Request) -> Settings:
    """Предоставляет настройки, с которыми создано приложение.

    Args:
        request: HTTP запрос FastAPI.

    Returns:
        Settings instance.

    """
    return request.app.state.settings


def get_task_service(request: Request) -> TaskLifecycleService:
    """Получить TaskLifecycleService из состояния приложения.

    Args:
        request: HTTP запрос FastAPI.

    Returns:
        Экземпляр TaskLifecycleService.

    Raises:
        ServiceUnavailableError: Если сервис ещё не инициализирован.

    """
    service = getattr(request.app.state, "task_service", None)
    if service is None:
        raise ServiceUnavailableError(message="TaskLifecycleService не инициализирован")
    return service


SettingsDep = Annotated[Settings, Depends(get_settings)]
TaskServiceDep = Annotated[TaskLifecycleService, Depends(get_task_service)]


async def verify_internal_secret(request: Request, settings: SettingsDep) -> None:
    """Проверить общий секрет привилегированного вызова.

    Сравнение побайтовое и за постоянное время. Если секрет не
    настроен, все привилегированные вызовы отклоняются.

    Args:
        request: HTTP запрос FastAPI.
        settings: Настройки приложения.

    Raises:
        UnauthorizedError: Если секрет отсутствует или не совпадает.

    """
    expected = settings.internal.secret
    provided = request.headers.get(settings.internal.header_name)

    if expected is None or provided is None:
        logger.warning("Привилегированный вызов без секрета", path=request.url.path)
        raise UnauthorizedError()

    # Starlette декодирует заголовки как latin-1, обратное кодирование даёт исходные байты
    if not hmac.compare_digest(provided.encode("latin-1"), expected.encode("utf-8")):
        logger.warning("Неверный внутренний секрет", path=request.url.path)
        raise UnauthorizedError()
