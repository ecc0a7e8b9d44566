"""Task Lifecycle Service - Logging Configuration.

Настройка Loguru для структурированного логирования.

Этот модуль настраивает единый логгер для всего приложения:
- Loguru для собственных логов (контекст передаётся через kwargs)
- Перехват логов сторонних библиотек (uvicorn, fastapi, sqlalchemy, redis, httpx)
- trace_id из ContextVar в каждой записи
"""

import json
import logging
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

from task_lifecycle.shared.errors.context import trace_id_var

if TYPE_CHECKING:
    from loguru import Logger, Record

    from task_lifecycle.core.config import Settings

SENSITIVE_KEYS = frozenset({"password", "token", "secret", "api_key", "access_token", "authorization"})

THIRD_PARTY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "sqlalchemy.engine",
    "aiosqlite",
    "redis",
    "httpx",
)


class InterceptHandler(logging.Handler):
    """Handler для перехвата логов стандартного logging и перенаправления в Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Перенаправить одну запись стандартного logging в Loguru.

        Args:
            record: Запись лога из стандартного logging

        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def sanitize_extra(extra: dict[str, Any]) -> dict[str, Any]:
    """Скрыть чувствительные значения в extra.

    Args:
        extra: Extra из записи Loguru

    Returns:
        Копия extra с замаскированными секретами

    """
    return {
        key: "***REDACTED***" if key.lower() in SENSITIVE_KEYS else value
        for key, value in extra.items()
        if not key.startswith("_")
    }


def trace_id_patcher(record: "Record") -> None:
    """Добавить trace_id в запись лога.

    Args:
        record: Запись лога

    """
    record["extra"]["trace_id"] = trace_id_var.get() or "no-trace"


def json_formatter(record: "Record") -> str:
    """JSON formatter для production логирования.

    Готовая JSON строка кладётся в extra, а Loguru получает шаблон,
    который только подставляет её. Так фигурные скобки в данных
    не интерпретируются как поля шаблона.

    Args:
        record: Record от Loguru

    Returns:
        Шаблон строки для Loguru

    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }
    log_entry.update(sanitize_extra(record["extra"]))

    if record["exception"] is not None:
        exc_type, exc_value, _ = record["exception"]
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "value": str(exc_value) if exc_value else None,
        }

    record["extra"]["_json"] = json.dumps(log_entry, ensure_ascii=False, default=str)
    return "{extra[_json]}\n"


def setup_logging(settings: "Settings") -> None:
    """Настроить Loguru для всего приложения.

    Конфигурация:
    - development + text: human-readable в stdout с цветами
    - иначе: JSON формат для structured logging

    Args:
        settings: Настройки приложения

    """
    logger.remove()
    logger.configure(patcher=trace_id_patcher)

    dev_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "trace_id=<yellow>{extra[trace_id]}</yellow> - "
        "<level>{message}</level>"
    )

    if settings.environment == "development" and settings.log.format == "text":
        logger.add(
            sys.stdout,
            format=dev_format,
            level=settings.log.level,
            colorize=True,
            backtrace=True,
            diagnose=settings.debug,
        )
    else:
        logger.add(
            sys.stdout,
            format=json_formatter,
            level=settings.log.level,
            backtrace=True,
            diagnose=False,
        )

    configure_third_party_loggers(settings)

    logger.info("Логгер настроен", level=settings.log.level, env=settings.environment)


def configure_third_party_loggers(settings: "Settings") -> None:
    """Перехватить логи сторонних библиотек и задать им уровни.

    Args:
        settings: Настройки приложения

    """
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.INFO)

    for logger_name in THIRD_PARTY_LOGGERS:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

        if logger_name in {"uvicorn.access", "httpx"}:
            logging_logger.setLevel(logging.WARNING if settings.environment == "production" else logging.INFO)
        elif logger_name == "sqlalchemy.engine":
            logging_logger.setLevel(logging.INFO if settings.database.echo else logging.WARNING)
        else:
            logging_logger.setLevel(logging.INFO)

    logger.debug("Сторонние логгеры настроены")


def get_logger(name: str | None = None) -> "Logger":
    """Получить настроенный logger instance.

    Args:
        name: Имя логгера (обычно __name__ модуля)

    Returns:
        Loguru logger, при наличии name привязанный к нему

    """
    if name:
        return logger.bind(logger_name=name)
    return logger
