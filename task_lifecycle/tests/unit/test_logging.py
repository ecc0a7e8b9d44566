"""Unit тесты для shared/logging/config.py."""

import json
import logging
from collections.abc import Iterator
from io import StringIO

import pytest
from loguru import logger

from task_lifecycle.core.config import LogSettings, Settings
from task_lifecycle.shared.errors import set_trace_id
from task_lifecycle.shared.logging import (
    InterceptHandler,
    configure_third_party_loggers,
    get_logger,
    json_formatter,
    sanitize_extra,
    setup_logging,
)


@pytest.fixture
def reset_logger() -> Iterator[None]:
    """Убрать sinks, привязанные к захваченному stdout."""
    yield
    logger.remove()


@pytest.fixture
def json_sink() -> Iterator[StringIO]:
    """Loguru sink с JSON форматом, удаляется после теста."""
    stream = StringIO()
    handler_id = logger.add(stream, format=json_formatter, level="DEBUG")
    yield stream
    logger.remove(handler_id)


class TestInterceptHandler:
    """Тесты для InterceptHandler."""

    def test_intercept_handler_emit(self, json_sink: StringIO) -> None:
        """Запись стандартного logging попадает в Loguru."""
        handler = InterceptHandler()
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test.py",
            lineno=10,
            msg="Test message %s",
            args=("42",),
            exc_info=None,
        )

        handler.emit(record)

        assert json.loads(json_sink.getvalue())["message"] == "Test message 42"

    def test_unknown_level_uses_levelno(self, json_sink: StringIO) -> None:
        """Нестандартный уровень передаётся числом."""
        record = logging.LogRecord("test", 25, "test.py", 1, "custom level", (), None)
        record.levelname = "NOTICE"

        InterceptHandler().emit(record)

        assert "custom level" in json_sink.getvalue()


class TestJsonFormatter:
    """Тесты для json_formatter."""

    def test_structured_fields(self, json_sink: StringIO) -> None:
        """kwargs попадают в JSON как поля."""
        logger.bind(task_id="task-1").info("Задача создана")

        entry = json.loads(json_sink.getvalue())
        assert entry["message"] == "Задача создана"
        assert entry["level"] == "INFO"
        assert entry["task_id"] == "task-1"
        assert "_json" not in entry

    def test_secrets_redacted(self, json_sink: StringIO) -> None:
        """Чувствительные ключи маскируются."""
        logger.bind(token="gh-token", secret="s3cret").info("Dispatch")

        entry = json.loads(json_sink.getvalue())
        assert entry["token"] == "***REDACTED***"
        assert entry["secret"] == "***REDACTED***"

    def test_braces_in_message(self, json_sink: StringIO) -> None:
        """Фигурные скобки в данных не ломают формат."""
        logger.bind(body='{"message": "Bad credentials"}').error("Dispatch отклонён {x}")

        entry = json.loads(json_sink.getvalue())
        assert entry["body"] == '{"message": "Bad credentials"}'

    def test_exception_info(self, json_sink: StringIO) -> None:
        """Исключение сериализуется типом и значением."""
        try:
            raise ValueError("boom")
        except ValueError:
            logger.exception("Ошибка")

        entry = json.loads(json_sink.getvalue().splitlines()[0])
        assert entry["exception"] == {"type": "ValueError", "value": "boom"}

    def test_sanitize_extra_drops_private_keys(self) -> None:
        """Служебные ключи с _ не попадают в вывод."""
        assert sanitize_extra({"_json": "x", "Authorization": "token", "task_id": "t"}) == {
            "Authorization": "***REDACTED***",
            "task_id": "t",
        }


class TestSetupLogging:
    """Тесты для setup_logging."""

    def test_setup_logging_development(self, capsys: pytest.CaptureFixture[str], reset_logger: None) -> None:
        """development + text: человекочитаемый вывод с trace_id."""
        setup_logging(Settings(_env_file=None))
        set_trace_id("trace-dev")

        logger.info("dev message")

        out = capsys.readouterr().out
        assert "dev message" in out
        assert "trace-dev" in out

    def test_setup_logging_production(self, capsys: pytest.CaptureFixture[str], reset_logger: None) -> None:
        """production: JSON формат."""
        setup_logging(Settings(_env_file=None, environment="production"))
        set_trace_id("trace-prod")

        logger.info("prod message")

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]
        entry = next(line for line in lines if line["message"] == "prod message")
        assert entry["trace_id"] == "trace-prod"

    def test_configure_third_party_loggers(self) -> None:
        """Сторонние логгеры перехватываются и не пропагируют."""
        configure_third_party_loggers(Settings(_env_file=None, log=LogSettings(level="DEBUG")))

        for name in ("uvicorn", "httpx", "sqlalchemy.engine"):
            std_logger = logging.getLogger(name)
            assert isinstance(std_logger.handlers[0], InterceptHandler)
            assert std_logger.propagate is False
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_get_logger_binds_name(self, json_sink: StringIO) -> None:
        """get_logger(name) добавляет logger_name в extra."""
        get_logger("task_lifecycle.test").info("named")

        assert json.loads(json_sink.getvalue())["logger_name"] == "task_lifecycle.test"
