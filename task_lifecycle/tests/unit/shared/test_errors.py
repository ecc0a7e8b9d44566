"""Тесты для иерархии исключений приложения.

Покрывает:
- Автоматическую генерацию code из имени класса
- Извлечение сообщения из docstring
- Статусы и details доменных ошибок
- Преобразование в ErrorResponse с trace_id
"""

import contextvars

import pytest

from task_lifecycle.shared.errors import (
    AppException,
    ErrorResponse,
    InvalidTransitionError,
    MalformedRequestError,
    ServiceUnavailableError,
    StoreUnavailableError,
    TaskAlreadyExistsError,
    TaskNotFoundError,
    UnauthorizedError,
    get_trace_id,
    set_trace_id,
    trace_id_var,
)


class TestAppException:
    """Тесты для базового класса AppException."""

    def test_code_generated_from_class_name(self):
        """code строится из CamelCase имени без суффикса Error."""

        class QueueOverflowError(AppException):
            """Очередь переполнена."""

        error = QueueOverflowError()
        assert error.code == "QUEUE_OVERFLOW"
        assert error.message == "Очередь переполнена."
        assert error.status_code == 500

    def test_explicit_overrides(self):
        """message, status_code и code можно переопределить в конструкторе."""
        error = AppException(message="custom", details={"a": 1}, status_code=418, code="TEAPOT")

        assert error.message == "custom"
        assert error.details == {"a": 1}
        assert error.status_code == 418
        assert error.code == "TEAPOT"

    def test_to_response_includes_trace_id(self):
        """to_response подставляет trace_id из контекста."""
        set_trace_id("trace-1")

        response = TaskNotFoundError("task-1").to_response()

        assert isinstance(response, ErrorResponse)
        assert response.error == "TASK_NOT_FOUND"
        assert response.details == {"task_id": "task-1"}
        assert response.trace_id == "trace-1"

    def test_openapi_response(self):
        """openapi_response содержит пример с кодом ошибки."""
        schema = UnauthorizedError.openapi_response()

        assert schema["model"] is ErrorResponse
        assert schema["content"]["application/json"]["example"]["error"] == "UNAUTHORIZED"


class TestDomainErrors:
    """Тесты доменных ошибок."""

    @pytest.mark.parametrize(
        ("error", "status_code", "code"),
        [
            (TaskNotFoundError("t"), 404, "TASK_NOT_FOUND"),
            (TaskAlreadyExistsError("t"), 409, "TASK_ALREADY_EXISTS"),
            (InvalidTransitionError("t", "completed", "failed"), 400, "INVALID_TRANSITION"),
            (MalformedRequestError(), 400, "MALFORMED_REQUEST"),
            (UnauthorizedError(), 403, "UNAUTHORIZED"),
            (StoreUnavailableError("cache", "get"), 503, "STORE_UNAVAILABLE"),
        ],
    )
    def test_status_and_code(self, error: AppException, status_code: int, code: str):
        """Каждая доменная ошибка имеет свой статус и код."""
        assert error.status_code == status_code
        assert error.code == code

    def test_invalid_transition_details(self):
        """InvalidTransitionError описывает текущий и целевой статус."""
        error = InvalidTransitionError("task-1", "completed", "failed")

        assert error.details == {"task_id": "task-1", "current": "completed", "target": "failed"}
        assert "completed -> failed" in error.message

    def test_store_unavailable_message(self):
        """StoreUnavailableError включает хранилище, операцию и причину."""
        error = StoreUnavailableError("durable", "insert", "database is locked")

        assert isinstance(error, ServiceUnavailableError)
        assert error.details == {"store": "durable", "operation": "insert", "reason": "database is locked"}
        assert error.message.endswith("database is locked")

    def test_store_unavailable_without_reason(self):
        """Причина необязательна."""
        error = StoreUnavailableError("cache", "set")

        assert error.details["reason"] is None
        assert error.message == "Хранилище 'cache' недоступно (set)"


class TestTraceContext:
    """Тесты trace_id контекста."""

    def test_set_returns_given_value(self):
        """Значение из заголовка сохраняется как есть."""
        assert set_trace_id("trace-abc") == "trace-abc"
        assert get_trace_id() == "trace-abc"

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header_generates_id(self, header: str | None):
        """Без заголовка выставляется новый trace_id."""
        trace_id = set_trace_id(header)

        assert trace_id
        assert get_trace_id() == trace_id

    def test_get_outside_request_is_stable(self):
        """Вне запроса trace_id создаётся один раз и дальше не меняется."""
        context = contextvars.Context()

        first, second = context.run(lambda: (get_trace_id(), get_trace_id()))

        assert first == second
        assert context[trace_id_var] == first
