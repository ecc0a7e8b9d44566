"""Модуль структурированного логирования.

Основное использование:
    >>> from task_lifecycle.shared.logging import setup_logging, get_logger
    >>> setup_logging(settings)  # Вызвать один раз при старте
    >>> logger = get_logger()
    >>> logger.info("Задача создана", task_id=task_id)
"""

from task_lifecycle.shared.logging.config import (
    InterceptHandler,
    configure_third_party_loggers,
    get_logger,
    json_formatter,
    sanitize_extra,
    setup_logging,
)

__all__ = [
    "InterceptHandler",
    "configure_third_party_loggers",
    "get_logger",
    "json_formatter",
    "sanitize_extra",
    "setup_logging",
]
