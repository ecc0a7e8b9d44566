"""Domain errors.

Доменные исключения приложения.
"""

from task_lifecycle.shared.errors.base import AppException


class BadRequestError(AppException):
    """Некорректный запрос."""

    status_code = 400
    code = "BAD_REQUEST"


class ForbiddenError(AppException):
    """Доступ запрещён."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(AppException):
    """Ресурс не найден."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppException):
    """Конфликт данных."""

    status_code = 409
    code = "CONFLICT"


class ServiceUnavailableError(AppException):
    """Сервис недоступен."""

    status_code = 503
    code = "SERVICE_UNAVAILABLE"


class TaskNotFoundError(NotFoundError):
    """Задача не найдена."""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str) -> None:
        """Инициализация исключения.

        Args:
            task_id: Идентификатор задачи.

        """
        self.task_id = task_id
        super().__init__(
            message=f"Задача с ID '{task_id}' не найдена",
            details={"task_id": task_id},
        )


class TaskAlreadyExistsError(ConflictError):
    """Задача с таким ID уже существует."""

    code = "TASK_ALREADY_EXISTS"

    def __init__(self, task_id: str) -> None:
        """Инициализация исключения.

        Args:
            task_id: Идентификатор задачи.

        """
        self.task_id = task_id
        super().__init__(
            message=f"Задача с ID '{task_id}' уже существует",
            details={"task_id": task_id},
        )


class InvalidTransitionError(BadRequestError):
    """Недопустимый переход статуса."""

    code = "INVALID_TRANSITION"

    def __init__(self, task_id: str, current: str, target: str) -> None:
        """Инициализация исключения.

        Args:
            task_id: Идентификатор задачи.
            current: Текущий статус.
            target: Запрошенный статус.

        """
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(
            message=f"Недопустимый переход статуса: {current} -> {target}",
            details={"task_id": task_id, "current": current, "target": target},
        )


class MalformedRequestError(BadRequestError):
    """Тело запроса не распознано или не содержит обязательных полей."""

    code = "MALFORMED_REQUEST"


class UnauthorizedError(ForbiddenError):
    """Неверный или отсутствующий внутренний секрет."""

    code = "UNAUTHORIZED"


class StoreUnavailableError(ServiceUnavailableError):
    """Хранилище недоступно."""

    code = "STORE_UNAVAILABLE"

    def __init__(self, store: str, operation: str, reason: str | None = None) -> None:
        """Инициализация исключения.

        Args:
            store: Название хранилища (durable, cache).
            operation: Операция, которая провалилась.
            reason: Причина недоступности.

        """
        self.store = store
        self.operation = operation
        message = f"Хранилище '{store}' недоступно ({operation})"
        if reason:
            message += f": {reason}"

        super().__init__(
            message=message,
            details={"store": store, "operation": operation, "reason": reason},
        )
